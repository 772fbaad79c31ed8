"""
命令行入口
"""
import argparse
import sys
from typing import List, Optional

from .models import CheckConfig
from .runner import CertificateCheckRunner
from .services.config_validator import ConfigValidator
from .services.error_handler import InputError
from .services.logger import LoggerService
from .services.name_source import NameSource

TOOL_VERSION = "0.2"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="certchk",
        description="check certificates of https sites"
    )
    parser.add_argument("names", nargs="*", metavar="name", help="server names to check")
    parser.add_argument("-s", dest="script_output", action="store_true",
                        help="produce less verbose output")
    parser.add_argument("-f", dest="domain_file", metavar="file",
                        help="read server names from file")
    parser.add_argument("--timeout", type=float, default=None,
                        help="connection timeout in seconds (default: 5)")
    parser.add_argument("--workers", dest="max_workers", type=int, default=None,
                        help="limit the number of concurrent probes (default: unlimited)")
    parser.add_argument("--cafile", dest="cafile", metavar="file", default=None,
                        help="trust the CA certificates in this PEM file instead of the system store")
    parser.add_argument("--sns-topic", dest="sns_topic_arn", metavar="ARN", default=None,
                        help="publish the report to this SNS topic")
    parser.add_argument("--log-level", dest="log_level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="log level for diagnostics on stderr (default: WARNING)")
    parser.add_argument("--version", dest="version_check", action="store_true",
                        help="show tool version")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    命令行主函数
    
    Args:
        argv: 命令行参数，默认为 sys.argv[1:]
        
    Returns:
        int: 进程退出码
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if args.version_check:
        print(f"{parser.prog} v{TOOL_VERSION}")
        return 0
    
    if not args.names and not args.domain_file:
        parser.print_help(sys.stderr)
        return 1
    
    validator = ConfigValidator()
    env_validation = validator.validate_environment_variables()
    if not env_validation['is_valid']:
        parser.error("; ".join(env_validation['errors']))
    
    config = CheckConfig.from_env(
        timeout=args.timeout,
        script_output=args.script_output,
        domain_file=args.domain_file,
        max_workers=args.max_workers,
        sns_topic_arn=args.sns_topic_arn,
        log_level=args.log_level,
        cafile=args.cafile
    )
    # 在读取名称之前配置日志，所有诊断输出使用同一格式
    logger_service = LoggerService(log_level=config.log_level)
    
    validation = validator.validate_config(config)
    if not validation['is_valid']:
        parser.error("; ".join(validation['errors']))
    
    # 名称收集失败是唯一的致命错误，发生在任何探测之前
    try:
        names = NameSource(config.domain_file, args.names).get_names()
    except InputError as e:
        print(e, file=sys.stderr)
        return 1
    
    summary = CertificateCheckRunner(config, logger_service=logger_service).execute(names)
    logger_service.log_run_summary(summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
