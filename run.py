"""Local development server.

Runs the app threaded so concurrent badge requests exercise the same
locking as a threaded WSGI server.
"""

import os

from wsgi import app


if __name__ == '__main__':
    host = os.environ.get('HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', 5000))
    app.run(host=host, port=port, threaded=True)
