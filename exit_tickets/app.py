#!/usr/bin/env python3
"""
Exit Ticket Reports
===================
Run: python3 -m exit_tickets.app
Then POST batches to: http://localhost:3000/api/reports/cohort
"""

import logging

from flask import Flask
from flask_cors import CORS

from exit_tickets.config import HOST, PORT, DEBUG
from exit_tickets.routes import register_routes

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = Flask(__name__)
CORS(app)
register_routes(app)


def main():
    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
