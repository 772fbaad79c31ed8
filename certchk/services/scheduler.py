"""
并发探测调度服务
"""
import queue
import threading
from typing import Iterable, Iterator, List, Optional
import logging

from ..interfaces import CertificateProbeInterface
from ..models import ProbeResult


class ProbeScheduler:
    """探测调度器：每个服务器名称一个线程，等待全部完成后返回"""
    
    def __init__(self, probe: CertificateProbeInterface, max_workers: Optional[int] = None):
        """
        初始化探测调度器
        
        Args:
            probe: 证书探测器
            max_workers: 同时进行的探测上限，None表示不限制
        """
        if max_workers is not None and max_workers < 1:
            raise ValueError(f"max_workers 必须大于0: {max_workers}")
        
        self.probe = probe
        self.max_workers = max_workers
        self.logger = logging.getLogger(__name__)
    
    def iter_results(self, names: Iterable[str]) -> Iterator[ProbeResult]:
        """
        并发探测所有服务器，按完成顺序产出结果
        
        生成器在取到与输入数量相同的结果并回收所有线程后才结束，
        重复的名称会被独立探测。
        
        Args:
            names: 服务器名称序列
            
        Yields:
            ProbeResult: 探测结果（顺序不保证）
        """
        names = list(names)
        if not names:
            return
        
        results: "queue.Queue[ProbeResult]" = queue.Queue()
        slots = threading.BoundedSemaphore(self.max_workers) if self.max_workers else None
        
        self.logger.debug(
            f"启动 {len(names)} 个探测线程，并发上限: {self.max_workers or '无'}"
        )
        
        threads = []
        for index, name in enumerate(names):
            thread = threading.Thread(
                target=self._worker,
                args=(name, results, slots),
                name=f"probe-{index}-{name}",
                daemon=True
            )
            thread.start()
            threads.append(thread)
        
        for _ in range(len(names)):
            yield results.get()
        
        for thread in threads:
            thread.join()
    
    def run(self, names: Iterable[str]) -> List[ProbeResult]:
        """
        并发探测所有服务器并收集结果
        
        Args:
            names: 服务器名称序列
            
        Returns:
            List[ProbeResult]: 与输入数量相同的探测结果
        """
        return list(self.iter_results(names))
    
    def _worker(self, name: str, results: "queue.Queue[ProbeResult]",
                slots: Optional[threading.BoundedSemaphore]):
        """单个探测线程：无论成功与否都恰好放入一个结果"""
        if slots is not None:
            slots.acquire()
        try:
            result = self.probe.probe(name)
        except Exception as e:
            self.logger.exception(f"探测服务器 {name} 时发生未预期的错误")
            result = ProbeResult.connection_failed(name, str(e) or type(e).__name__)
        finally:
            if slots is not None:
                slots.release()
        results.put(result)
