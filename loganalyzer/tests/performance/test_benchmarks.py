"""
Performance benchmarks for parsing and aggregation
"""

import pytest
import time
from loganalyzer import Analyzer


def generate_lines(count):
    methods = ['GET', 'POST', 'PUT']
    return [
        f"{methods[i % 3]} /users/{i % 97}/items {200 + (i % 5) * 100} {i % 50}.{i % 10} {i * 7 % 4096}"
        for i in range(count)
    ]


@pytest.mark.benchmark
class TestPerformanceBenchmarks:
    """Benchmark parsing and analysis throughput"""

    def test_parse_throughput(self, simple_format, benchmark):
        """Benchmark batch parsing"""
        analyzer = Analyzer(simple_format)
        lines = generate_lines(1000)

        records = benchmark(analyzer.parse, lines)

        assert len(records) == 1000
        throughput = len(lines) / benchmark.stats.stats.mean
        assert throughput > 1000

    def test_analysis_speed(self, simple_format, benchmark):
        """Benchmark full analysis with routes and groups"""
        analyzer = Analyzer(simple_format)
        analyzer.use('/users/:id').use('POST', '/users/:id/items').group('status').group('method')
        lines = generate_lines(1000)

        result = benchmark(analyzer.analyze, lines)

        assert result['overall']['overview']['totalRequests'] == 1000
        assert benchmark.stats.stats.mean < 1.0

    @pytest.mark.parametrize("dataset_size", [100, 1000, 10000])
    def test_scalability(self, simple_format, dataset_size):
        """Streaming throughput stays steady across dataset sizes"""
        text = "\n".join(generate_lines(dataset_size))
        chunks = [text[i:i + 4096] for i in range(0, len(text), 4096)]
        analyzer = Analyzer(simple_format).group('status')

        start = time.time()
        outcome = analyzer.analyze_stream(chunks)
        elapsed = time.time() - start

        assert outcome.record_count == dataset_size
        throughput = dataset_size / max(elapsed, 1e-6)
        assert throughput > 500, f"Throughput {throughput:.0f} lines/sec is too low"
