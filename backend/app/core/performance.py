"""
Timing metrics for engine and request processing.
"""
import inspect
import time
import logging
from typing import Any, Dict, List, Optional
from functools import wraps
from collections import defaultdict
import threading

logger = logging.getLogger(__name__)

# Keep only the most recent samples per metric
MAX_SAMPLES = 1000

_metrics_lock = threading.Lock()
_metrics: Dict[str, List[Dict[str, Any]]] = defaultdict(list)


def _summarize(samples: List[Dict[str, Any]]) -> Dict[str, float]:
    values = sorted(s['value'] for s in samples)
    return {
        'count': len(values),
        'min': values[0],
        'max': values[-1],
        'mean': sum(values) / len(values),
        'p50': values[len(values) // 2],
        'p95': values[int(len(values) * 0.95)],
    }


class PerformanceMonitor:
    """Collects duration samples per named metric."""

    @staticmethod
    def record_metric(name: str, value: float, metadata: Optional[Dict[str, Any]] = None):
        """
        Record a sample.

        Args:
            name: Metric name (e.g., 'aggregate', 'request_duration')
            value: Sample value, usually a duration in seconds
            metadata: Optional context such as status or correlation_id
        """
        with _metrics_lock:
            samples = _metrics[name]
            samples.append({'value': value, 'timestamp': time.time(), 'metadata': metadata or {}})
            if len(samples) > MAX_SAMPLES:
                del samples[:-MAX_SAMPLES]

    @staticmethod
    def get_stats(metric_name: str) -> Optional[Dict[str, float]]:
        """Summary statistics for a metric, or None if it has no samples."""
        with _metrics_lock:
            samples = _metrics.get(metric_name)
            return _summarize(samples) if samples else None

    @staticmethod
    def get_all_metrics() -> Dict[str, Dict[str, float]]:
        with _metrics_lock:
            return {name: _summarize(samples) for name, samples in _metrics.items() if samples}

    @staticmethod
    def clear_metrics():
        """Clear all metrics (useful for testing)."""
        with _metrics_lock:
            _metrics.clear()


def _finish(metric_name: str, start_time: float, error: Optional[Exception] = None):
    duration = time.time() - start_time
    if error is None:
        PerformanceMonitor.record_metric(metric_name, duration, {'status': 'success'})
        logger.debug(
            f"{metric_name} completed in {duration:.3f}s",
            extra={'metric': metric_name, 'duration': duration}
        )
    else:
        PerformanceMonitor.record_metric(metric_name, duration, {'status': 'error', 'error': str(error)})
        logger.error(
            f"{metric_name} failed after {duration:.3f}s: {error}",
            extra={'metric': metric_name, 'duration': duration}
        )


def track_performance(metric_name: str):
    """
    Decorator recording how long a sync or async function takes.

    Usage:
        @track_performance("aggregate")
        def aggregate(...):
            ...
    """
    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _finish(metric_name, start_time, e)
                    raise
                _finish(metric_name, start_time)
                return result
            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _finish(metric_name, start_time, e)
                raise
            _finish(metric_name, start_time)
            return result
        return sync_wrapper

    return decorator
