"""Per-stage timing and memory profiling for the animation pipeline."""

import functools
import time
from typing import Any, Callable, Dict

import click
import psutil


class StageProfiler:
    """Record execution time and memory usage of named pipeline stages."""

    def __init__(self):
        self.metrics: Dict[str, Dict[str, Any]] = {}
        self.process = psutil.Process()

    def profile_function(self, name: str):
        """Decorator to profile function execution."""
        def decorator(func: Callable) -> Callable:
            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.perf_counter()
                start_memory = self.process.memory_info().rss
                try:
                    return func(*args, **kwargs)
                finally:
                    self._record(name, start_time, start_memory)
            return wrapper
        return decorator

    def _record(self, name: str, start_time: float, start_memory: int) -> None:
        duration = time.perf_counter() - start_time
        end_memory = self.process.memory_info().rss

        existing = self.metrics.get(name, {
            'total_duration': 0.0,
            'peak_memory': start_memory,
            'calls': 0,
        })
        self.metrics[name] = {
            'duration': duration,
            'total_duration': existing['total_duration'] + duration,
            'memory_delta': end_memory - start_memory,
            'peak_memory': max(existing['peak_memory'], end_memory),
            'calls': existing['calls'] + 1,
        }

    def reset(self) -> None:
        self.metrics.clear()

    def get_summary(self) -> Dict[str, Any]:
        """Get performance summary."""
        if not self.metrics:
            return {
                'total_time': 0.0,
                'peak_memory_mb': 0.0,
                'by_stage': {}
            }

        return {
            'total_time': sum(m['total_duration'] for m in self.metrics.values()),
            'peak_memory_mb': max(m['peak_memory'] for m in self.metrics.values()) / (1024 * 1024),
            'by_stage': dict(self.metrics),
        }

    def print_summary(self, title: str = "Performance Summary") -> None:
        """Print formatted performance summary."""
        summary = self.get_summary()

        click.echo(f"\n{title}")
        click.echo("=" * len(title))
        click.echo(f"Total Time: {summary['total_time']:.2f}s")
        click.echo(f"Peak Memory: {summary['peak_memory_mb']:.1f}MB")

        for name, metrics in summary['by_stage'].items():
            click.echo(f"  {name}:")
            click.echo(f"    Time: {metrics['total_duration']:.3f}s")
            click.echo(f"    Memory: {metrics['memory_delta'] / (1024 * 1024):+.1f}MB")
            click.echo(f"    Calls: {metrics['calls']}")


# Global profiler instance for easy access
global_profiler = StageProfiler()
