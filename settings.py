from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Esplora-совместимый API (blockstream.info или свой electrs)
    BTC_API_BASE: str = "https://blockstream.info/api"
    # сколько блоков поверх последнего блока прогона должно быть добыто
    BTC_CONFIRMATIONS: int = 0
    BTC_FETCH_CONCURRENCY: int = 6
    HTTP_TIMEOUT: float = 20.0

    STORE_DIR: str = "./storage/draws"

    # значения по умолчанию для новых розыгрышей
    DEFAULT_HASH_ROUNDS: int = 0
    DEFAULT_BLOCKS_FOR_VERIFICATION: int = 6

    # верхние границы: раунды хеширования идут синхронно, блоки тянутся из API
    MAX_HASH_ROUNDS: int = 100_000
    MAX_BLOCKS_AHEAD: int = 1008
    MAX_BLOCKS_FOR_VERIFICATION: int = 100

    LOG_LEVEL: str = "INFO"

settings = Settings()
