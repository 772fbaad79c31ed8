"""
证书检查运行器测试
"""
from collections import Counter
from datetime import datetime, timezone, timedelta
from io import StringIO
from unittest.mock import patch, MagicMock

from certchk.interfaces import CertificateProbeInterface
from certchk.models import CheckConfig, ProbeResult
from certchk.runner import CertificateCheckRunner


class StaticProbe(CertificateProbeInterface):
    """按预设表返回结果的探测器"""
    
    def __init__(self, not_after: datetime):
        self.not_after = not_after
    
    def probe(self, server: str) -> ProbeResult:
        if server == "127.0.0.1":
            return ProbeResult.connection_failed(server, "[Errno 111] Connection refused")
        if server.startswith("wrong"):
            return ProbeResult.verification_failed(server, "Hostname mismatch")
        return ProbeResult.valid(server, self.not_after)


class TestCertificateCheckRunner:
    """证书检查运行器测试类"""
    
    def setup_method(self):
        """测试前准备"""
        self.stream = StringIO()
        self.probe = StaticProbe(datetime(2030, 1, 1, tzinfo=timezone.utc))
    
    def _runner(self, **config) -> CertificateCheckRunner:
        return CertificateCheckRunner(CheckConfig(**config), stream=self.stream, probe=self.probe)
    
    def test_script_output(self):
        """测试脚本模式输出每个服务器一行"""
        runner = self._runner(script_output=True)
        
        summary = runner.execute(["example.com", "127.0.0.1", "wrong.host.com"])
        
        lines = self.stream.getvalue().splitlines()
        assert sorted(lines) == sorted([
            "   example.com valid 2030-01-01",
            "     127.0.0.1 error 1970-01-01 ([Errno 111] Connection refused)",
            "wrong.host.com error 1970-01-01 (Hostname mismatch)",
        ])
        assert summary.total_servers == 3
        assert summary.valid == 1
        assert summary.verification_failed == 1
        assert summary.connection_failed == 1
        assert summary.failed == 2
    
    def test_verbose_output_has_header(self):
        """测试详细模式先输出表头"""
        runner = self._runner()
        
        runner.execute(["example.com"])
        
        lines = self.stream.getvalue().splitlines()
        assert lines[0] == "     Server | Certificate status"
        assert lines[1].startswith("------------+-")
        assert lines[2].startswith("example.com | valid, expires on 2030-01-01 (")
        assert len(lines) == 3
    
    def test_single_valid_scenario(self):
        """测试单个有效服务器"""
        summary = self._runner(script_output=True).execute(["example.com"])
        
        assert self.stream.getvalue() == "example.com valid 2030-01-01\n"
        assert summary.valid == 1
    
    def test_empty_names(self):
        """测试没有服务器时只输出表头"""
        summary = self._runner().execute([])
        
        assert summary.total_servers == 0
        assert len(self.stream.getvalue().splitlines()) == 2
    
    def test_duplicates_reported_twice(self):
        """测试重复名称产生两行报告"""
        self._runner(script_output=True).execute(["a.com", "a.com"])
        
        lines = self.stream.getvalue().splitlines()
        assert lines == ["a.com valid 2030-01-01", "a.com valid 2030-01-01"]
    
    def test_hundred_servers(self):
        """测试100个服务器产生100行完整输出"""
        names = [f"host{i}.example.com" if i % 2 else "127.0.0.1" for i in range(100)]
        
        summary = self._runner(script_output=True).execute(names)
        
        lines = self.stream.getvalue().splitlines()
        assert len(lines) == 100
        assert Counter(line.split()[0] for line in lines) == Counter(names)
        assert summary.total_servers == 100
    
    def test_expiring_summary(self):
        """测试即将过期统计"""
        self.probe = StaticProbe(datetime.now(timezone.utc) + timedelta(days=3))
        
        summary = self._runner(script_output=True, warning_days=30).execute(["soon.com"])
        
        assert [r.server for r in summary.expiring_soon] == ["soon.com"]
    
    def test_publishes_report(self):
        """测试配置了发布器时发送报告"""
        publisher = MagicMock()
        publisher.send_report.return_value = True
        runner = CertificateCheckRunner(
            CheckConfig(script_output=True), stream=self.stream, probe=self.probe, publisher=publisher
        )
        
        runner.execute(["example.com", "127.0.0.1"])
        
        publisher.send_report.assert_called_once()
        sent = publisher.send_report.call_args[0][0]
        assert sorted(r.server for r in sent) == ["127.0.0.1", "example.com"]
    
    def test_publish_failure_is_not_fatal(self):
        """测试发布失败不影响运行结果"""
        publisher = MagicMock()
        publisher.send_report.side_effect = RuntimeError("network down")
        logger_service = MagicMock()
        runner = CertificateCheckRunner(
            CheckConfig(script_output=True), stream=self.stream, probe=self.probe,
            publisher=publisher, logger_service=logger_service
        )
        
        summary = runner.execute(["example.com"])
        
        assert summary.valid == 1
        logger_service.log_error.assert_called_once_with("SNS", publisher.send_report.side_effect)
        logger_service.log_notification_sent.assert_called_once_with("SNS", 1, False)
    
    @patch('certchk.runner.SNSReportPublisher')
    def test_publisher_created_from_topic(self, mock_publisher_cls):
        """测试配置SNS主题时创建发布器"""
        config = CheckConfig(sns_topic_arn="arn:aws:sns:us-east-1:123456789012:certchk")
        
        runner = CertificateCheckRunner(config, stream=self.stream, probe=self.probe)
        
        assert runner.publisher is mock_publisher_cls.return_value
        assert mock_publisher_cls.call_args[0][0] == "arn:aws:sns:us-east-1:123456789012:certchk"
    
    def test_no_publisher_without_topic(self):
        """测试未配置SNS主题时不发布"""
        assert self._runner().publisher is None
    
    def test_each_result_logged_once(self):
        """测试每个结果只交给日志服务一次"""
        logger_service = MagicMock()
        runner = CertificateCheckRunner(
            CheckConfig(script_output=True), stream=self.stream, probe=self.probe,
            logger_service=logger_service
        )
        
        runner.execute(["example.com", "127.0.0.1"])
        
        logger_service.log_check_start.assert_called_once_with(2)
        logged = sorted(call[0][0].server for call in logger_service.log_result.call_args_list)
        assert logged == ["127.0.0.1", "example.com"]
        logger_service.log_error.assert_not_called()
    
    def test_default_probe_from_config(self):
        """测试按配置创建默认探测器"""
        runner = CertificateCheckRunner(CheckConfig(timeout=2.0, max_workers=4), stream=self.stream)
        
        assert runner.probe.timeout == 2.0
        assert runner.probe.port == 443
        assert runner.scheduler.max_workers == 4
