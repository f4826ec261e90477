"""
WSGI entry point for the email authentication checker.

WSGI hosts import this module and look for the ``app`` variable.  The
development server can also be started by running this file directly.

=============================================================================
DEPLOYMENT
=============================================================================

1. INSTALL
     pip install .

2. SET ENVIRONMENT VARIABLES (all optional)
     SECRET_KEY=<a-long-random-string>
     DNS_RESOLVERS=8.8.8.8,1.1.1.1
     DNS_TIMEOUT_SECONDS=4.0
     CHECK_DEADLINE_SECONDS=30.0
     CORS_ALLOW_ORIGIN=https://checker.example.com

3. SERVE
   Point any WSGI server at ``wsgi:app``.  Outbound UDP/TCP port 53 to the
   configured resolvers must be allowed, otherwise every check reports
   "error" with a timeout.

=============================================================================
LOCAL DEVELOPMENT
=============================================================================

  python wsgi.py
  curl 'http://127.0.0.1:5000/api/check?domain=example.com&esp=generic'

For testing:

  pip install -e .[test]
  pytest tests/ -v

=============================================================================
"""

from __future__ import annotations

from authcheck import create_app

app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
