"""
报告格式化服务
"""
from datetime import datetime, timezone
from typing import Iterable, Optional

import humanize

from ..interfaces import ReportFormatterInterface
from ..models import ProbeResult

DATE_FORMAT = '%Y-%m-%d'
SENTINEL_DATE = '1970-01-01'
LINE_WIDTH = 80


def compute_width(names: Iterable[str]) -> int:
    """报告中服务器名称列的宽度"""
    return max((len(name) for name in names), default=0)


class ReportFormatter(ReportFormatterInterface):
    """
    将探测结果渲染为对齐的文本行

    两种输出模式：
    - 详细模式：竖线分隔，带绝对日期和相对时间
    - 脚本模式：固定的 valid/error 标记加 YYYY-MM-DD 日期，便于机器解析
    """
    
    def __init__(self, width: int, script_output: bool = False, now: Optional[datetime] = None):
        """
        初始化报告格式化器
        
        Args:
            width: 服务器名称列宽度
            script_output: 是否使用脚本模式
            now: 计算相对时间的参考时间，默认为当前UTC时间
        """
        self.width = width
        self.script_output = script_output
        self.now = now
    
    def header(self) -> Optional[str]:
        """
        报告表头
        
        Returns:
            Optional[str]: 详细模式下的两行表头，脚本模式下为None
        """
        if self.script_output:
            return None
        
        rule = "-" * self.width + "-+-" + "-" * (LINE_WIDTH - self.width - 2)
        return f"{'Server':>{self.width}} | Certificate status\n{rule}"
    
    def format(self, result: ProbeResult) -> str:
        """
        格式化单条探测结果
        
        Args:
            result: 探测结果
            
        Returns:
            str: 不含换行符的报告行
        """
        server = f"{result.server:>{self.width}}"
        
        if result.is_valid:
            expires = result.not_after.strftime(DATE_FORMAT)
            if self.script_output:
                return f"{server} valid {expires}"
            return f"{server} | valid, expires on {expires} ({self._relative(result.not_after)})"
        
        if self.script_output:
            return f"{server} error {SENTINEL_DATE} ({result.reason})"
        return f"{server} | {result.reason}"
    
    def _relative(self, moment: datetime) -> str:
        now = self.now or datetime.now(timezone.utc)
        return humanize.naturaltime(moment, when=now)
