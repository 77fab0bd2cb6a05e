"""만료 캐시 정리 스케줄러 작업."""
import logging

from core.cache import APICache

logger = logging.getLogger(__name__)


async def sweep_expired_cache(cache: APICache) -> int:
    """
    만료된 캐시 엔트리를 물리적으로 제거.
    조회 시에도 만료 여부를 확인하므로 정합성이 아닌 메모리 정리 목적입니다.
    """
    removed = cache.purge_expired()
    if removed:
        logger.info(f"만료 캐시 정리: {removed}건")
    else:
        logger.debug("만료 캐시 없음")
    return removed
