"""
Service context extraction for log lines.

Identifies which gate device / service instance emitted a line, so logs from
several scanners hitting the same backend can be told apart.
"""

import os
from functools import lru_cache


@lru_cache(maxsize=1)
def get_service_context() -> str:
    service_name = os.getenv('SERVICE_NAME', 'check-in')
    deploy_env = os.getenv('DEPLOY_ENV', 'local_dev')
    instance = os.getenv('GATE_ID') or str(os.getpid())
    return f'{service_name}@{deploy_env}:{instance}'
