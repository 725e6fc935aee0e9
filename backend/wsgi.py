# backend/wsgi.py
from cabinops import create_app

app = create_app()
