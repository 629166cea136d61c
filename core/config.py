import os

from dotenv import load_dotenv

# wczytanie .env (dev-friendly); .env.local uzupełnia tylko brakujące wartości
load_dotenv()
load_dotenv(dotenv_path=".env.local", override=False)


class Config:
    # Dane – katalog lokalny albo bazowy URL http(s)://
    DATA_ROOT = os.environ.get("DATA_ROOT", "data")
    # Timeout dla zdalnych tabel (sekundy)
    REMOTE_TIMEOUT = float(os.environ.get("REMOTE_TIMEOUT", "30"))

    DEFAULT_CASE_STUDY = os.environ.get("DEFAULT_CASE_STUDY", "us-china")
    # Domyślny rok suwaka; pusty = pierwszy rok z danych
    DEFAULT_YEAR = os.environ.get("DEFAULT_YEAR", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Debounce dla szybkich zmian filtrów (sekundy)
    DEBOUNCE_SECONDS = float(os.environ.get("DEBOUNCE_SECONDS", "0.3"))

    # Mapa
    MARKER_BASE_RADIUS = float(os.environ.get("MARKER_BASE_RADIUS", "8"))
    NEUTRAL_COLOR = os.environ.get("NEUTRAL_COLOR", "#777")

    # Progi kolorowania tabeli makro (w %)
    INFLATION_ALERT_PCT = float(os.environ.get("INFLATION_ALERT_PCT", "3"))
    UNEMPLOYMENT_ALERT_PCT = float(os.environ.get("UNEMPLOYMENT_ALERT_PCT", "5"))

    SNAPSHOT_DIR = os.environ.get("SNAPSHOT_DIR", "data/snapshots")
