from flask_sqlalchemy import SQLAlchemy

# Extensions are created unbound; create_app() attaches them to the app.

# Database
db = SQLAlchemy()
