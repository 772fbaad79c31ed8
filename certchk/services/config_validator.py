"""
配置验证服务
"""
import os
import re
from typing import Dict, Any
import logging

from ..models import CheckConfig

SNS_TOPIC_ARN_PATTERN = r'^arn:aws:sns:[a-z0-9-]+:\d{12}:[a-zA-Z0-9_-]+$'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'WARN', 'ERROR', 'CRITICAL')


class ConfigValidator:
    """配置验证器"""
    
    def __init__(self):
        """初始化配置验证器"""
        self.logger = logging.getLogger(__name__)
        
        # 可选的环境变量
        self.optional_env_vars = {
            'CERTCHK_TIMEOUT': '连接超时时间（秒）',
            'CERTCHK_MAX_WORKERS': '并发探测上限',
            'SNS_TOPIC_ARN': 'SNS主题ARN',
            'LOG_LEVEL': '日志级别',
            'CERTCHK_CAFILE': '信任的CA证书文件'
        }
    
    def validate_environment_variables(self) -> Dict[str, Any]:
        """
        验证环境变量
        
        Returns:
            Dict[str, Any]: 环境变量验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': [],
            'present_vars': {}
        }
        
        for var_name, description in self.optional_env_vars.items():
            value = os.getenv(var_name)
            if value:
                result['present_vars'][var_name] = self._sanitize_env_value(var_name, value)
        
        timeout = os.getenv('CERTCHK_TIMEOUT')
        if timeout:
            try:
                float(timeout)
            except ValueError:
                result['is_valid'] = False
                result['errors'].append(f"CERTCHK_TIMEOUT 格式无效: {timeout}")
        
        max_workers = os.getenv('CERTCHK_MAX_WORKERS')
        if max_workers:
            try:
                int(max_workers)
            except ValueError:
                result['is_valid'] = False
                result['errors'].append(f"CERTCHK_MAX_WORKERS 格式无效: {max_workers}")
        
        return result
    
    def validate_config(self, config: CheckConfig) -> Dict[str, Any]:
        """
        验证检查配置
        
        Args:
            config: 检查配置
            
        Returns:
            Dict[str, Any]: 验证结果
        """
        result = {
            'is_valid': True,
            'errors': [],
            'warnings': []
        }
        
        if config.timeout <= 0:
            result['errors'].append(f"超时时间必须大于0: {config.timeout}")
        elif config.timeout > 60:
            result['warnings'].append(f"超时时间过长: {config.timeout}秒")
        
        if not 0 < config.port < 65536:
            result['errors'].append(f"端口号无效: {config.port}")
        
        if config.max_workers is not None and config.max_workers < 1:
            result['errors'].append(f"并发探测上限必须大于0: {config.max_workers}")
        
        if config.warning_days < 0:
            result['errors'].append(f"提前警告天数不能为负数: {config.warning_days}")
        
        if config.sns_topic_arn and not re.match(SNS_TOPIC_ARN_PATTERN, config.sns_topic_arn):
            result['errors'].append(f"SNS主题ARN格式无效: {config.sns_topic_arn}")
        
        if config.cafile and not os.path.isfile(config.cafile):
            result['errors'].append(f"CA证书文件不存在: {config.cafile}")
        
        if config.log_level.upper() not in LOG_LEVELS:
            result['warnings'].append(f"未知的日志级别: {config.log_level}，将使用WARNING")
        
        if result['errors']:
            result['is_valid'] = False
            for error in result['errors']:
                self.logger.debug(f"配置错误: {error}")
        
        for warning in result['warnings']:
            self.logger.warning(f"配置警告: {warning}")
        
        return result
    
    def _sanitize_env_value(self, var_name: str, value: str) -> str:
        """
        清理环境变量值（隐藏敏感信息）
        
        Args:
            var_name: 变量名
            value: 变量值
            
        Returns:
            str: 清理后的值
        """
        if var_name == 'SNS_TOPIC_ARN' and value.startswith('arn:'):
            # ARN类型，只显示前缀和后缀
            parts = value.split(':')
            if len(parts) >= 6:
                return f"{':'.join(parts[:3])}:***:{parts[-2]}:{parts[-1]}"
            return "***"
        
        return value
