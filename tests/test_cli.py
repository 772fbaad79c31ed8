"""
命令行入口测试
"""
import os
import pytest
from unittest.mock import patch

from certchk.cli import main, TOOL_VERSION
from certchk.models import CheckConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ('CERTCHK_TIMEOUT', 'CERTCHK_MAX_WORKERS', 'SNS_TOPIC_ARN', 'LOG_LEVEL', 'CERTCHK_CAFILE'):
        monkeypatch.delenv(name, raising=False)


class TestCli:
    """命令行入口测试类"""
    
    def test_version(self, capsys):
        """测试打印版本"""
        assert main(["--version"]) == 0
        
        assert capsys.readouterr().out == f"certchk v{TOOL_VERSION}\n"
    
    @patch('certchk.cli.CertificateCheckRunner')
    def test_no_names(self, mock_runner, capsys):
        """测试没有名称也没有文件时输出用法"""
        assert main([]) == 1
        
        assert "usage: certchk" in capsys.readouterr().err
        mock_runner.assert_not_called()
    
    @patch('certchk.cli.CertificateCheckRunner')
    def test_missing_domain_file(self, mock_runner, tmp_path, capsys):
        """测试域名列表文件不存在时在探测前退出"""
        assert main(["-f", str(tmp_path / "missing.txt"), "example.com"]) == 1
        
        assert "missing.txt" in capsys.readouterr().err
        mock_runner.assert_not_called()
    
    @patch('certchk.cli.LoggerService')
    @patch('certchk.cli.CertificateCheckRunner')
    def test_names_from_file_and_arguments(self, mock_runner, mock_logger_service, tmp_path):
        """测试从文件和参数收集名称"""
        domain_file = tmp_path / "domains.txt"
        domain_file.write_text("# sites\nexample.com  main\n", encoding="utf-8")
        
        assert main(["-s", "-f", str(domain_file), "example.org"]) == 0
        
        config = mock_runner.call_args[0][0]
        assert isinstance(config, CheckConfig)
        assert config.script_output is True
        assert config.domain_file == str(domain_file)
        mock_runner.return_value.execute.assert_called_once_with(["example.com", "example.org"])
    
    @patch('certchk.cli.LoggerService')
    @patch('certchk.cli.CertificateCheckRunner')
    def test_options(self, mock_runner, mock_logger_service):
        """测试命令行选项写入配置"""
        main([
            "--timeout", "2.5", "--workers", "10", "--log-level", "DEBUG",
            "--sns-topic", "arn:aws:sns:us-east-1:123456789012:certchk", "example.com"
        ])
        
        config = mock_runner.call_args[0][0]
        assert config.timeout == 2.5
        assert config.max_workers == 10
        assert config.log_level == "DEBUG"
        assert config.sns_topic_arn == "arn:aws:sns:us-east-1:123456789012:certchk"
        assert config.script_output is False
    
    @patch.dict(os.environ, {'CERTCHK_TIMEOUT': '7'})
    @patch('certchk.cli.LoggerService')
    @patch('certchk.cli.CertificateCheckRunner')
    def test_timeout_from_env(self, mock_runner, mock_logger_service):
        """测试从环境变量读取超时时间"""
        main(["example.com"])
        
        assert mock_runner.call_args[0][0].timeout == 7.0
    
    @patch('certchk.cli.CertificateCheckRunner')
    def test_invalid_timeout(self, mock_runner):
        """测试无效超时时间"""
        with pytest.raises(SystemExit) as exc_info:
            main(["--timeout", "0", "example.com"])
        
        assert exc_info.value.code == 2
        mock_runner.assert_not_called()
    
    @patch.dict(os.environ, {'CERTCHK_MAX_WORKERS': 'lots'})
    @patch('certchk.cli.CertificateCheckRunner')
    def test_invalid_env(self, mock_runner):
        """测试无效环境变量"""
        with pytest.raises(SystemExit) as exc_info:
            main(["example.com"])
        
        assert exc_info.value.code == 2
        mock_runner.assert_not_called()
    
    @patch('certchk.cli.CertificateCheckRunner')
    def test_invalid_sns_topic(self, mock_runner, capsys):
        """测试无效SNS主题ARN"""
        with pytest.raises(SystemExit):
            main(["--sns-topic", "topic", "example.com"])
        
        assert "SNS" in capsys.readouterr().err
    
    @patch('certchk.cli.LoggerService')
    @patch('certchk.cli.CertificateCheckRunner')
    def test_run_summary_logged(self, mock_runner, mock_logger_service):
        """测试运行结束后记录摘要"""
        assert main(["example.com"]) == 0
        
        logger_service = mock_logger_service.return_value
        assert mock_runner.call_args[1]['logger_service'] is logger_service
        logger_service.log_run_summary.assert_called_once_with(mock_runner.return_value.execute.return_value)
    
    @patch('certchk.cli.CertificateCheckRunner')
    def test_input_error_printed_once(self, mock_runner, tmp_path, capsys):
        """测试名称收集失败时标准错误只有一行"""
        missing = tmp_path / "missing.txt"
        
        assert main(["-f", str(missing)]) == 1
        
        err = capsys.readouterr().err
        assert err.count(str(missing)) == 1
        assert len(err.splitlines()) == 1
