"""
服务器名称来源服务
"""
from typing import Iterable, List, Optional
import logging

from ..interfaces import NameSourceInterface
from .error_handler import InputError


class NameSource(NameSourceInterface):
    """服务器名称来源实现：域名列表文件加命令行参数"""
    
    def __init__(self, domain_file: Optional[str] = None, names: Iterable[str] = ()):
        """
        初始化名称来源
        
        Args:
            domain_file: 域名列表文件路径，每行一个名称
            names: 直接指定的服务器名称
        """
        self.domain_file = domain_file
        self.names = list(names)
        self.logger = logging.getLogger(__name__)
    
    def get_names(self) -> List[str]:
        """
        收集服务器名称，文件中的名称在前，不去重
        
        Returns:
            List[str]: 服务器名称列表
            
        Raises:
            InputError: 域名列表文件无法打开或读取
        """
        names = []
        
        if self.domain_file:
            names.extend(self._read_domain_file(self.domain_file))
        
        names.extend(self.names)
        
        self.logger.info(f"共收集到 {len(names)} 个服务器名称")
        return names
    
    def _read_domain_file(self, path: str) -> List[str]:
        """
        读取域名列表文件
        
        Args:
            path: 文件路径
            
        Returns:
            List[str]: 文件中的服务器名称
            
        Raises:
            InputError: 文件无法打开或读取
        """
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                names = [name for name in (self.parse_line(line) for line in fh) if name]
        except (OSError, UnicodeDecodeError) as e:
            self.logger.debug(f"读取域名列表文件 {path} 失败: {str(e)}")
            raise InputError(str(e)) from e
        
        self.logger.info(f"从文件 {path} 读取了 {len(names)} 个服务器名称")
        return names
    
    @staticmethod
    def parse_line(line: str) -> Optional[str]:
        """
        解析域名列表文件中的一行
        
        跳过空行和以 # 开头的注释行，只取第一个空白分隔的字段。
        
        Args:
            line: 原始行
            
        Returns:
            Optional[str]: 服务器名称，忽略的行返回None
        """
        line = line.strip()
        if not line or line.startswith('#'):
            return None
        return line.split()[0]
