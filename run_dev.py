#!/usr/bin/env python3
"""
Development server runner.

Runs Gunicorn with the eventlet worker by default; with
SOCKETIO_ASYNC_MODE=threading it falls back to the Flask-SocketIO
development server, which needs no worker class.
"""

import os
import subprocess
import sys


def main():
    """Run the development server."""
    os.environ.setdefault('FLASK_ENV', 'development')
    os.environ.setdefault('PORT', '8000')

    from config_factory import load_config
    config = load_config()
    print(f"Scrum Poker development server at http://{config.host}:{config.port}")
    print("Press Ctrl+C to stop the server")

    if config.async_mode == 'threading':
        from app import app, socketio
        socketio.run(app, host=config.host, port=config.port, debug=True, allow_unsafe_werkzeug=True)
        return

    cmd = [
        'gunicorn',
        '--config', 'gunicorn.conf.py',
        '--reload',  # Auto-reload on code changes
        '--log-level', config.log_level,
        'wsgi:app'
    ]
    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        print("\nShutting down development server...")
    except subprocess.CalledProcessError as e:
        print(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
