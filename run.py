from pledgeflow import create_app
import os

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5050))
    app.run(
        host="127.0.0.1",
        port=port,
        debug=False,
        use_reloader=False,
    )

# Local:
# poetry run alembic upgrade head
# PORT=5050 poetry run python run.py
#
# Scheduled sweep (e.g. hourly cron):
# curl -H "Authorization: Bearer $CRON_SECRET" http://127.0.0.1:5050/expire-pledges
