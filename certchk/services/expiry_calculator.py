"""
证书过期计算服务
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional
from ..models import ProbeResult, ProbeStatus


class ExpiryCalculator:
    """
    证书过期计算器
    
    已过期的证书在握手验证阶段就被判定为验证失败，
    因此有效结果只区分即将过期和健康两类。
    """
    
    def __init__(self, warning_days: int = 30, now: Optional[datetime] = None):
        """
        初始化过期计算器
        
        Args:
            warning_days: 提前警告天数，默认30天
            now: 参考时间，默认为当前UTC时间
        """
        self.warning_days = warning_days
        self.now = now
    
    def calculate_days_until_expiry(self, expiry_date: datetime) -> int:
        """
        计算距离过期的天数
        
        Args:
            expiry_date: 过期时间
            
        Returns:
            int: 剩余天数
        """
        now = self.now or datetime.now(timezone.utc)
        delta = expiry_date - now
        return delta.days
    
    def is_expiring_soon(self, result: ProbeResult) -> bool:
        """
        判断证书是否即将过期（在警告期内）
        
        Args:
            result: 探测结果
            
        Returns:
            bool: 是否即将过期，失败的探测结果始终为False
        """
        if not result.is_valid:
            return False
        return self.calculate_days_until_expiry(result.not_after) <= self.warning_days
    
    def categorize_results(self, results: List[ProbeResult]) -> Dict[str, List[ProbeResult]]:
        """
        对探测结果进行分类
        
        Args:
            results: 探测结果列表
            
        Returns:
            dict: 分类结果
        """
        valid = [r for r in results if r.is_valid]
        
        return {
            'valid': valid,
            'verification_failed': [r for r in results if r.status is ProbeStatus.VERIFICATION_FAILED],
            'connection_failed': [r for r in results if r.status is ProbeStatus.CONNECTION_FAILED],
            'expiring_soon': [r for r in valid if self.is_expiring_soon(r)],
            'healthy': [r for r in valid if not self.is_expiring_soon(r)]
        }
    
    def get_expiry_summary(self, results: List[ProbeResult]) -> str:
        """
        获取过期状态摘要
        
        Args:
            results: 探测结果列表
            
        Returns:
            str: 摘要信息
        """
        categorized = self.categorize_results(results)
        failed = len(categorized['verification_failed']) + len(categorized['connection_failed'])
        
        summary_parts = [
            f"总计: {len(results)} 个服务器",
            f"有效: {len(categorized['valid'])} 个",
            f"失败: {failed} 个"
        ]
        
        if categorized['expiring_soon']:
            summary_parts.append(f"即将过期({self.warning_days}天内): {len(categorized['expiring_soon'])} 个")
        
        if categorized['healthy']:
            summary_parts.append(f"健康: {len(categorized['healthy'])} 个")
        
        return ", ".join(summary_parts)
