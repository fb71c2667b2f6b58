"""
Gunicorn Configuration Tests
"""

import importlib.util
import os
from unittest.mock import patch

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def load_gunicorn_conf():
    spec = importlib.util.spec_from_file_location(
        'gunicorn_conf', os.path.join(PROJECT_ROOT, 'gunicorn.conf.py')
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestGunicornConf:
    """Test the production server settings"""

    def setup_method(self):
        with patch.dict(os.environ, {'FLASK_ENV': 'testing', 'PORT': '8123'}, clear=True):
            self.conf = load_gunicorn_conf()

    def test_single_eventlet_worker(self):
        assert self.conf.workers == 1
        assert self.conf.worker_class == 'eventlet'

    def test_worker_is_never_recycled(self):
        # Recycling the only worker would drop every stored participant
        assert getattr(self.conf, 'max_requests', 0) == 0
        assert getattr(self.conf, 'max_requests_jitter', 0) == 0

    def test_bind_from_configuration(self):
        assert self.conf.bind == '0.0.0.0:8123'
