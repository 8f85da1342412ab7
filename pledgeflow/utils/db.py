import psycopg2


def get_db_connection(dsn: str):
    """
    Connect to the Supabase Postgres database.

    `dsn` is the private connection string (service credentials); the
    public anon key handed to the browser is never used here.
    """
    return psycopg2.connect(dsn)
