# === FILE: focus_scout/scanner.py ===
"""
Модуль-обёртка для функции запуска обхода.
"""
from focus_scout.config import CrawlerConfig
from focus_scout.crawler.crawler import FocusedCrawler
from focus_scout.crawler.models import CrawlResult


async def start_crawl(cfg: CrawlerConfig) -> CrawlResult:
    """
    Запускает краулер в контексте и возвращает результат обхода.

    Parameters
    ----------
    cfg : CrawlerConfig
        Конфигурация обхода.

    Returns
    -------
    CrawlResult
        Состояние завершения и список сохранённых страниц.
    """
    async with FocusedCrawler(cfg) as crawler:
        result = await crawler.crawl()
    return result

__all__ = ["start_crawl"]
