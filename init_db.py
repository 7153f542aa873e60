#!/usr/bin/env python
"""Create the database tables ahead of the first deploy.

Usage:
    DATABASE_URL=postgresql://... python init_db.py
"""

import os
import sys
from app import create_app, db


if __name__ == '__main__':
    app = create_app(os.getenv('FLASK_ENV', 'development'))
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            print(f"Could not create tables: {type(e).__name__}: {e}")
            sys.exit(1)
        print(f"Tables ready: {', '.join(sorted(db.metadata.tables))}")
