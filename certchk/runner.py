"""
证书检查运行入口
"""
import ssl
import sys
import time
from typing import List, Optional, TextIO

from .interfaces import CertificateProbeInterface, NotificationServiceInterface
from .models import CheckConfig, ProbeResult, RunSummary
from .services.certificate_probe import CertificateProbe
from .services.expiry_calculator import ExpiryCalculator
from .services.logger import LoggerService
from .services.report_formatter import ReportFormatter, compute_width
from .services.scheduler import ProbeScheduler
from .services.sns_notification import SNSReportPublisher


class CertificateCheckRunner:
    """证书检查运行器：串联调度、格式化、日志和通知"""
    
    def __init__(self, config: CheckConfig, stream: Optional[TextIO] = None,
                 probe: Optional[CertificateProbeInterface] = None,
                 publisher: Optional[NotificationServiceInterface] = None,
                 logger_service: Optional[LoggerService] = None):
        """
        初始化运行器
        
        Args:
            config: 检查配置
            stream: 报告输出流，默认为标准输出
            probe: 证书探测器，默认按配置创建
            publisher: 报告发布器，默认在配置了SNS主题时创建
            logger_service: 日志服务，默认按配置的日志级别创建
        """
        self.config = config
        self.stream = stream or sys.stdout
        self.logger_service = logger_service or LoggerService(log_level=config.log_level)
        self.expiry_calculator = ExpiryCalculator(warning_days=config.warning_days)
        
        if probe is None:
            ssl_context = ssl.create_default_context(cafile=config.cafile) if config.cafile else None
            probe = CertificateProbe(timeout=config.timeout, port=config.port, ssl_context=ssl_context)
        self.probe = probe
        self.scheduler = ProbeScheduler(self.probe, max_workers=config.max_workers)
        
        if publisher is None and config.sns_topic_arn:
            publisher = SNSReportPublisher(config.sns_topic_arn, expiry_calculator=self.expiry_calculator)
        self.publisher = publisher
    
    def execute(self, names: List[str]) -> RunSummary:
        """
        检查所有服务器并输出报告
        
        Args:
            names: 服务器名称列表
            
        Returns:
            RunSummary: 检查结果统计
        """
        start_time = time.monotonic()
        self.logger_service.log_check_start(len(names))
        
        formatter = ReportFormatter(compute_width(names), script_output=self.config.script_output)
        header = formatter.header()
        if header is not None:
            self._write(header)
        
        # 单一消费者负责输出，避免多线程交错写入
        results = []
        for result in self.scheduler.iter_results(names):
            results.append(result)
            self._write(formatter.format(result))
            self.logger_service.log_result(result)
        
        categorized = self.expiry_calculator.categorize_results(results)
        summary = RunSummary(
            total_servers=len(results),
            valid=len(categorized['valid']),
            verification_failed=len(categorized['verification_failed']),
            connection_failed=len(categorized['connection_failed']),
            expiring_soon=categorized['expiring_soon'],
            execution_time=time.monotonic() - start_time
        )
        
        if self.publisher is not None:
            self._publish(results)
        
        return summary
    
    def _write(self, line: str):
        self.stream.write(line + "\n")
        self.stream.flush()
    
    def _publish(self, results: List[ProbeResult]) -> bool:
        """
        发布检查报告，失败只记录日志
        
        Args:
            results: 全部探测结果
            
        Returns:
            bool: 发送是否成功
        """
        try:
            success = self.publisher.send_report(results)
        except Exception as e:
            self.logger_service.log_error("SNS", e)
            success = False
        
        self.logger_service.log_notification_sent("SNS", len(results), success)
        return success
