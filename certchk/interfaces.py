"""
服务接口定义
"""
from abc import ABC, abstractmethod
from typing import List, Optional
from .models import ProbeResult


class NameSourceInterface(ABC):
    """服务器名称来源接口"""
    
    @abstractmethod
    def get_names(self) -> List[str]:
        """获取服务器名称列表"""
        pass


class CertificateProbeInterface(ABC):
    """证书探测器接口"""
    
    @abstractmethod
    def probe(self, server: str) -> ProbeResult:
        """探测单个服务器的证书，返回唯一的探测结果"""
        pass


class ReportFormatterInterface(ABC):
    """报告格式化接口"""
    
    @abstractmethod
    def header(self) -> Optional[str]:
        """报告表头，无表头时返回None"""
        pass
    
    @abstractmethod
    def format(self, result: ProbeResult) -> str:
        """格式化单条探测结果"""
        pass


class NotificationServiceInterface(ABC):
    """通知服务接口"""
    
    @abstractmethod
    def send_report(self, results: List[ProbeResult]) -> bool:
        """发送检查报告"""
        pass
    
    @abstractmethod
    def format_notification_content(self, results: List[ProbeResult]) -> str:
        """格式化通知内容"""
        pass


class LoggerServiceInterface(ABC):
    """日志服务接口"""
    
    @abstractmethod
    def log_check_start(self, server_count: int):
        """记录检查开始"""
        pass
    
    @abstractmethod
    def log_result(self, result: ProbeResult):
        """记录探测结果"""
        pass
    
    @abstractmethod
    def log_error(self, server: str, error: Exception):
        """记录错误信息"""
        pass
