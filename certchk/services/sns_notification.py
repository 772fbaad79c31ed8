"""
SNS通知服务
"""
import time
from datetime import datetime, timezone
from typing import List, Optional
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..interfaces import NotificationServiceInterface
from ..models import ProbeResult, ProbeStatus
from .expiry_calculator import ExpiryCalculator

# SNS Subject 最长100个字符
MAX_SUBJECT_LENGTH = 100


class SNSReportPublisher(NotificationServiceInterface):
    """将检查报告发布到SNS主题"""
    
    def __init__(self, topic_arn: str, region_name: Optional[str] = None,
                 expiry_calculator: Optional[ExpiryCalculator] = None):
        """
        初始化SNS报告发布器
        
        Args:
            topic_arn: SNS主题ARN
            region_name: AWS区域名称，如果为None则从ARN中提取
            expiry_calculator: 过期计算器，用于报告分类
        """
        self.topic_arn = topic_arn
        self.region_name = region_name or topic_arn.split(':')[3]
        self.expiry_calculator = expiry_calculator or ExpiryCalculator()
        self.logger = logging.getLogger(__name__)
        
        self.sns_client = boto3.client('sns', region_name=self.region_name)
        self.logger.info(f"SNS客户端初始化成功，区域: {self.region_name}")
    
    def send_report(self, results: List[ProbeResult]) -> bool:
        """
        发送检查报告
        
        Args:
            results: 全部探测结果
            
        Returns:
            bool: 发送是否成功
        """
        subject = self._format_subject(results)
        message = self.format_notification_content(results)
        
        return self._publish_with_retry(subject, message)
    
    def _publish_with_retry(self, subject: str, message: str, max_retries: int = 3) -> bool:
        """
        带重试机制的SNS消息发布
        
        Args:
            subject: 消息主题
            message: 消息内容
            max_retries: 最大重试次数
            
        Returns:
            bool: 发送是否成功
        """
        for attempt in range(max_retries + 1):
            try:
                response = self.sns_client.publish(
                    TopicArn=self.topic_arn,
                    Subject=subject,
                    Message=message
                )
                
                self.logger.info(f"SNS通知发送成功，MessageId: {response.get('MessageId')}")
                return True
                
            except ClientError as e:
                error_code = e.response['Error']['Code']
                error_message = e.response['Error']['Message']
                
                if self._is_retryable_error(error_code) and attempt < max_retries:
                    wait_time = 2 ** attempt  # 指数退避
                    self.logger.warning(
                        f"SNS发送失败 (尝试 {attempt + 1}/{max_retries + 1}) - {error_code}: {error_message}，"
                        f"{wait_time}秒后重试"
                    )
                    time.sleep(wait_time)
                    continue
                
                self.logger.error(f"SNS发送失败 - {error_code}: {error_message}")
                return False
                
            except BotoCoreError as e:
                self.logger.error(f"发送SNS通知时发生错误: {str(e)}")
                return False
        
        return False
    
    def _is_retryable_error(self, error_code: str) -> bool:
        """
        判断错误是否可重试
        
        Args:
            error_code: AWS错误代码
            
        Returns:
            bool: 是否可重试
        """
        retryable_errors = {
            'Throttling',
            'ServiceUnavailable',
            'InternalError',
            'RequestTimeout'
        }
        return error_code in retryable_errors
    
    def _format_subject(self, results: List[ProbeResult]) -> str:
        """
        格式化消息主题
        
        Args:
            results: 探测结果列表
            
        Returns:
            str: 消息主题
        """
        categorized = self.expiry_calculator.categorize_results(results)
        failed = len(categorized['verification_failed']) + len(categorized['connection_failed'])
        expiring = len(categorized['expiring_soon'])
        
        if failed and expiring:
            subject = f"certchk: {failed} failed, {expiring} expiring | {len(results)} servers"
        elif failed:
            subject = f"certchk: {failed} failed | {len(results)} servers"
        elif expiring:
            subject = f"certchk: {expiring} expiring | {len(results)} servers"
        else:
            subject = f"certchk: all valid | {len(results)} servers"
        
        return subject[:MAX_SUBJECT_LENGTH]
    
    def format_notification_content(self, results: List[ProbeResult]) -> str:
        """
        格式化通知内容
        
        Args:
            results: 探测结果列表
            
        Returns:
            str: 格式化的通知内容
        """
        if not results:
            return "没有检查任何服务器。"
        
        categorized = self.expiry_calculator.categorize_results(results)
        
        lines = [
            "证书检查报告",
            "=" * 30,
            f"检查时间: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC",
            f"服务器数量: {len(results)}",
            ""
        ]
        
        failed = categorized['verification_failed'] + categorized['connection_failed']
        if failed:
            lines.extend(["检查失败:", "-" * 30])
            for result in sorted(failed, key=lambda r: r.server):
                label = "验证失败" if result.status is ProbeStatus.VERIFICATION_FAILED else "连接失败"
                lines.append(f"• {result.server} ({label}): {result.reason}")
            lines.append("")
        
        if categorized['expiring_soon']:
            lines.extend([f"即将过期 ({self.expiry_calculator.warning_days}天内):", "-" * 30])
            for result in sorted(categorized['expiring_soon'], key=lambda r: r.not_after):
                days = self.expiry_calculator.calculate_days_until_expiry(result.not_after)
                lines.append(f"• {result.server} - {result.not_after.strftime('%Y-%m-%d')}，剩余 {days} 天")
            lines.append("")
        
        if categorized['healthy']:
            lines.extend(["证书正常:", "-" * 30])
            for result in sorted(categorized['healthy'], key=lambda r: r.server):
                lines.append(f"• {result.server} - {result.not_after.strftime('%Y-%m-%d')}")
            lines.append("")
        
        lines.append(self.expiry_calculator.get_expiry_summary(results))
        
        return "\n".join(lines)
