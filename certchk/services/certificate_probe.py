"""
证书探测服务
"""
import ssl
import socket
from datetime import datetime, timezone
from typing import Optional
import logging

from ..interfaces import CertificateProbeInterface
from ..models import ProbeResult
from .error_handler import ProbeErrorHandler


class CertificateProbe(CertificateProbeInterface):
    """证书探测器实现：每次调用只建立一次TLS连接，不重试"""
    
    def __init__(self, timeout: float = 5.0, port: int = 443,
                 ssl_context: Optional[ssl.SSLContext] = None):
        """
        初始化证书探测器
        
        Args:
            timeout: 建立连接的超时时间（秒），同时约束TLS握手
            port: TLS端口，默认443
            ssl_context: 客户端TLS上下文，默认使用系统信任库的默认上下文；
                必须开启证书验证和主机名检查
        """
        self.timeout = timeout
        self.port = port
        self.ssl_context = ssl_context
        self.logger = logging.getLogger(__name__)
        self.error_handler = ProbeErrorHandler()
    
    def probe(self, server: str) -> ProbeResult:
        """
        探测单个服务器的证书
        
        Args:
            server: 服务器名称，同时作为拨号目标和主机名验证对象
            
        Returns:
            ProbeResult: 探测结果，三种状态之一
        """
        try:
            cert = self._get_peer_certificate(server)
        except (OSError, ValueError) as e:
            # ssl.SSLCertVerificationError 同时是 OSError 和 ValueError 的子类
            error_info = self.error_handler.handle_probe_error(server, e)
            if error_info['is_verification_error']:
                return ProbeResult.verification_failed(server, error_info['error_message'])
            return ProbeResult.connection_failed(server, error_info['error_message'])
        
        if not cert:
            self.logger.debug(f"服务器 {server} 握手成功但没有对端证书")
            return ProbeResult.connection_failed(server, "no peer certificates")
        
        not_after = self._parse_expiry_date(cert)
        if not_after is None:
            self.logger.debug(f"服务器 {server} 的证书中未找到过期时间信息")
            return ProbeResult.connection_failed(server, "certificate has no expiry date")
        
        self.logger.debug(f"服务器 {server} 证书有效，过期时间: {not_after.isoformat()}")
        return ProbeResult.valid(server, not_after)
    
    def _get_peer_certificate(self, server: str) -> dict:
        """
        建立TLS连接并获取叶子证书
        
        上下文在握手时同时完成证书链验证和主机名匹配（不区分大小写，
        支持通配符和IP地址SAN），验证失败抛出 ssl.SSLCertVerificationError。
        
        Args:
            server: 服务器名称
            
        Returns:
            dict: 叶子证书信息，对端未提供证书时为空
            
        Raises:
            ssl.SSLCertVerificationError: 证书验证失败
            OSError: 连接、DNS或握手失败
        """
        context = self.ssl_context or ssl.create_default_context()
        
        with socket.create_connection((server, self.port), timeout=self.timeout) as sock:
            with context.wrap_socket(sock, server_hostname=server) as ssock:
                cert = ssock.getpeercert()
        
        return cert or {}
    
    def _parse_expiry_date(self, cert: dict) -> Optional[datetime]:
        """
        解析证书过期时间
        
        Args:
            cert: 叶子证书信息
            
        Returns:
            Optional[datetime]: UTC过期时间，缺失或无法解析时为None
        """
        not_after = cert.get('notAfter')
        if not not_after:
            return None
        
        # 时间格式：'Dec 31 23:59:59 2024 GMT'
        try:
            expiry_date = datetime.strptime(not_after, '%b %d %H:%M:%S %Y %Z')
        except ValueError:
            return None
        
        return expiry_date.replace(tzinfo=timezone.utc)
