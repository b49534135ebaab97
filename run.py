import os

from intake import create_app

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5050))
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=port, debug=False, use_reloader=False)

# Local development:
# docker compose --env-file .env.docker up -d   (Postgres, optional Redis)
# poetry run alembic upgrade head
# PORT=5050 poetry run python run.py   OR   poetry run flask --app intake:create_app run
