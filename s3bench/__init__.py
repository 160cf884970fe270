from __future__ import annotations

# s3bench - S3 Operation Latency Benchmark
"""
Usage:
    python -m s3bench --bucket my-bucket --iterations 20
    python -m s3bench --endpoint http://localhost:9000 --object-size 4096
"""

__version__ = "1.0.0"
