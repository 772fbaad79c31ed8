"""
日志服务
"""
import os
import logging
from typing import Optional
from ..interfaces import LoggerServiceInterface
from ..models import ProbeResult, ProbeStatus, RunSummary


class LoggerService(LoggerServiceInterface):
    """
    日志服务实现
    
    诊断日志写到标准错误，报告独占标准输出。每个服务器的结果已经出现在
    报告行中，因此单个服务器的结果只在DEBUG/INFO级别记录，默认的
    WARNING级别下标准错误保持安静。
    """
    
    def __init__(self, logger_name: str = "certchk", log_level: Optional[str] = None):
        """
        初始化日志服务
        
        Args:
            logger_name: 日志器名称
            log_level: 日志级别，如果为None则从环境变量读取
        """
        self.logger_name = logger_name
        self.log_level = log_level or os.getenv('LOG_LEVEL', 'WARNING')
        
        self.logger = logging.getLogger(logger_name)
        self._configure_logger()
    
    def _configure_logger(self):
        """配置日志器，重复初始化只更新级别"""
        level = getattr(logging, self.log_level.upper(), logging.WARNING)
        self.logger.setLevel(level)
        
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            self.logger.addHandler(handler)
        
        for handler in self.logger.handlers:
            handler.setLevel(level)
        
        self.logger.propagate = False
    
    def log_check_start(self, server_count: int):
        """
        记录检查开始
        
        Args:
            server_count: 要检查的服务器数量
        """
        self.logger.info(f"开始证书检查，共 {server_count} 个服务器")
    
    def log_result(self, result: ProbeResult):
        """
        记录探测结果
        
        Args:
            result: 探测结果
        """
        if result.status is ProbeStatus.VALID:
            self.logger.debug(f"证书有效 - 服务器: {result.server}, 过期时间: {result.not_after.isoformat()}")
        elif result.status is ProbeStatus.VERIFICATION_FAILED:
            self.logger.info(f"证书验证失败 - 服务器: {result.server}, 原因: {result.reason}")
        else:
            self.logger.info(f"连接失败 - 服务器: {result.server}, 原因: {result.reason}")
    
    def log_error(self, server: str, error: Exception):
        """
        记录错误信息
        
        Args:
            server: 出错的对象（服务器名称或 "SNS"）
            error: 异常对象
        """
        self.logger.error(f"{server} 发生错误: {type(error).__name__}: {str(error)}")
        self.logger.debug(f"{server} 错误详情", exc_info=error)
    
    def log_run_summary(self, summary: RunSummary):
        """
        记录运行摘要
        
        Args:
            summary: 检查结果统计
        """
        self.logger.info(
            f"证书检查完成，耗时 {summary.execution_time:.2f} 秒: "
            f"总计 {summary.total_servers} 个服务器, "
            f"有效 {summary.valid} 个, "
            f"验证失败 {summary.verification_failed} 个, "
            f"连接失败 {summary.connection_failed} 个"
        )
        
        for result in summary.expiring_soon:
            self.logger.info(
                f"证书即将过期 - 服务器: {result.server}, 过期时间: {result.not_after.strftime('%Y-%m-%d')}"
            )
    
    def log_notification_sent(self, notification_type: str, result_count: int, success: bool):
        """
        记录通知发送状态
        
        Args:
            notification_type: 通知类型（如 "SNS"）
            result_count: 报告中的结果数量
            success: 是否发送成功
        """
        if success:
            self.logger.info(f"{notification_type} 通知发送成功，包含 {result_count} 条结果")
        else:
            self.logger.error(f"{notification_type} 通知发送失败，包含 {result_count} 条结果")
