from decouple import config, Csv

DATABASE_URL = config("DATABASE_URL", default="sqlite:///./companion.db")  # postgresql+psycopg2://... in prod
DB_ECHO = config("DB_ECHO", default=False, cast=bool)
DB_CREATE_TABLES = config("DB_CREATE_TABLES", default=True, cast=bool)

LOG_LEVEL = config("LOG_LEVEL", default="INFO")

CORS_ORIGINS = config("CORS_ORIGINS", default="http://localhost:5173", cast=Csv())  # Frontend port
