# movienight/__main__.py
import os

from .app import create_app

app = create_app()
app.run(debug=(os.getenv("FLASK_ENV") == "development"))
