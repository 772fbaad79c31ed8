"""
错误处理服务
"""
import socket
import ssl
from typing import Any, Dict
from datetime import datetime, timezone
import logging


class InputError(Exception):
    """服务器名称来源无法读取，整个运行在探测前终止"""


class ProbeErrorHandler:
    """探测错误处理器，不做重试，只负责分类和描述"""
    
    def __init__(self):
        """初始化探测错误处理器"""
        self.logger = logging.getLogger(__name__)
    
    def is_verification_error(self, error: Exception) -> bool:
        """
        判断错误是否属于证书验证失败（主机名不匹配、过期、根证书不受信任等）
        
        Args:
            error: 异常对象
            
        Returns:
            bool: 是否为验证失败，其余错误都按连接失败处理
        """
        return isinstance(error, ssl.SSLCertVerificationError)
    
    def describe(self, error: Exception) -> str:
        """
        生成写入报告的失败原因
        
        Args:
            error: 异常对象
            
        Returns:
            str: 失败原因描述
        """
        if self.is_verification_error(error):
            verify_message = getattr(error, 'verify_message', None)
            if verify_message:
                return verify_message
        
        if isinstance(error, socket.timeout) and not str(error):
            return "timed out"
        
        message = str(error)
        return message if message else type(error).__name__
    
    def handle_probe_error(self, server: str, error: Exception) -> Dict[str, Any]:
        """
        处理探测错误
        
        失败原因会出现在报告行中，这里只在调试级别记录。
        
        Args:
            server: 服务器名称
            error: 异常对象
            
        Returns:
            Dict[str, Any]: 错误处理结果
        """
        error_info = {
            'server': server,
            'error_type': type(error).__name__,
            'error_message': self.describe(error),
            'is_verification_error': self.is_verification_error(error),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'suggested_action': self._get_suggested_action(error)
        }
        
        self.logger.debug(
            f"服务器 {server} 探测失败 ({error_info['error_type']}): {error_info['error_message']}，"
            f"建议: {error_info['suggested_action']}"
        )
        
        return error_info
    
    def _get_suggested_action(self, error: Exception) -> str:
        """
        获取错误的建议处理方案
        
        Args:
            error: 异常对象
            
        Returns:
            str: 建议的处理方案
        """
        error_message = str(error).lower()
        
        if isinstance(error, socket.timeout):
            return "检查网络连接，考虑增加超时时间"
        elif isinstance(error, socket.gaierror):
            return "检查域名是否正确，DNS服务器是否可用"
        elif isinstance(error, ConnectionRefusedError):
            return "检查目标服务器是否运行，端口是否正确"
        elif isinstance(error, ssl.SSLCertVerificationError):
            if 'mismatch' in error_message:
                return "证书与主机名不匹配，检查证书的SAN配置"
            elif 'expired' in error_message:
                return "证书已过期，立即续期"
            else:
                return "证书验证失败，可能是自签名证书或证书链问题"
        elif isinstance(error, ssl.SSLError):
            if 'handshake failure' in error_message:
                return "SSL握手失败，检查SSL/TLS版本兼容性"
            else:
                return "SSL连接问题，检查服务器SSL配置"
        elif 'network is unreachable' in error_message:
            return "网络不可达，检查网络连接和路由"
        elif 'no route to host' in error_message:
            return "无法路由到主机，检查防火墙和网络配置"
        else:
            return "检查网络连接和服务器状态"
