"""
数据模型定义
"""
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List


class ProbeStatus(Enum):
    """探测结果类型"""
    VALID = "valid"
    VERIFICATION_FAILED = "verification_failed"
    CONNECTION_FAILED = "connection_failed"


@dataclass(frozen=True)
class ProbeResult:
    """单个服务器的证书探测结果，创建后不可修改"""
    server: str
    status: ProbeStatus
    not_after: Optional[datetime] = None
    reason: Optional[str] = None

    @classmethod
    def valid(cls, server: str, not_after: datetime) -> "ProbeResult":
        return cls(server=server, status=ProbeStatus.VALID, not_after=not_after)

    @classmethod
    def verification_failed(cls, server: str, reason: str) -> "ProbeResult":
        return cls(server=server, status=ProbeStatus.VERIFICATION_FAILED, reason=reason)

    @classmethod
    def connection_failed(cls, server: str, reason: str) -> "ProbeResult":
        return cls(server=server, status=ProbeStatus.CONNECTION_FAILED, reason=reason)

    @property
    def is_valid(self) -> bool:
        """握手与主机名验证均成功"""
        return self.status is ProbeStatus.VALID

    @property
    def expiry_date(self) -> Optional[datetime]:
        return self.not_after


@dataclass(frozen=True)
class CheckConfig:
    """一次检查运行的配置"""
    timeout: float = 5.0
    port: int = 443
    script_output: bool = False
    domain_file: Optional[str] = None
    max_workers: Optional[int] = None
    warning_days: int = 30
    sns_topic_arn: Optional[str] = None
    log_level: str = "WARNING"
    cafile: Optional[str] = None

    @classmethod
    def from_env(cls, **overrides) -> "CheckConfig":
        """
        从环境变量构建配置，显式传入的参数优先

        Args:
            **overrides: 覆盖环境变量的配置项（值为None的项被忽略）

        Returns:
            CheckConfig: 配置对象

        Raises:
            ValueError: 环境变量的数值格式无效
        """
        values = {}

        timeout = os.getenv('CERTCHK_TIMEOUT')
        if timeout:
            values['timeout'] = float(timeout)

        max_workers = os.getenv('CERTCHK_MAX_WORKERS')
        if max_workers:
            values['max_workers'] = int(max_workers)

        topic_arn = os.getenv('SNS_TOPIC_ARN')
        if topic_arn:
            values['sns_topic_arn'] = topic_arn

        log_level = os.getenv('LOG_LEVEL')
        if log_level:
            values['log_level'] = log_level

        cafile = os.getenv('CERTCHK_CAFILE')
        if cafile:
            values['cafile'] = cafile

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


@dataclass
class RunSummary:
    """检查结果统计"""
    total_servers: int
    valid: int
    verification_failed: int
    connection_failed: int
    expiring_soon: List[ProbeResult] = field(default_factory=list)
    execution_time: float = 0.0

    @property
    def failed(self) -> int:
        return self.verification_failed + self.connection_failed
