# backend/wsgi.py
from beermachine import create_app

app = create_app()
