"""서버 사이드 인메모리 TTL 캐시.

매물 조회 경로 앞단의 읽기 캐시입니다.
- 매물 상세: entity:{id}, 기본 TTL (CACHE_TTL, 기본 3600초)
- 기본 목록(필터 없음): listing:{page}:{limit}:{sortBy}:{sortOrder}, 기본 TTL, "listing" 태그
- 지역 목록: popular_locations, 3600초 고정

프로세스 로컬 캐시이므로 여러 인스턴스 간에는 공유되지 않습니다.
LRU 같은 용량 기반 축출은 없고, TTL 만료와 명시적 삭제로만 정리됩니다.

사용법:
    cache = APICache(default_ttl=settings.cache_ttl)

    cached = cache.get("entity:abc")
    if cached is None:
        value = await load()
        cache.set("entity:abc", value)

    # 태그 단위 무효화
    cache.set("listing:1:10:createdAt:desc", page, tags=["listing"])
    cache.invalidate_tag("listing")
"""
import asyncio
import logging
import time
from typing import Any, Iterable, Optional

from fastapi import Request

logger = logging.getLogger(__name__)


class APICache:
    """간단한 키-값 TTL 캐시 (태그 인덱스 + 키별 single-flight 락)."""

    def __init__(self, default_ttl: float = 3600):
        self.default_ttl = default_ttl
        self._store: dict[str, tuple[float, float, Any]] = {}  # key -> (expire_at, ttl, value)
        self._tags: dict[str, set[str]] = {}  # tag -> {keys}
        self._key_tags: dict[str, set[str]] = {}  # key -> {tags}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, key: str) -> Optional[Any]:
        """캐시에서 값을 조회합니다. 만료되었으면 None 반환."""
        if key in self._store:
            expire_at, _, value = self._store[key]
            if time.monotonic() < expire_at:
                return value
            self._remove(key)
        return None

    def set(
        self,
        key: str,
        value: Any,
        ttl: Optional[float] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> None:
        """캐시에 값을 저장합니다. 기존 엔트리는 덮어씁니다.

        Args:
            key: 캐시 키
            value: 저장할 값
            ttl: 만료 시간(초). None이면 default_ttl
            tags: 무효화 그룹 태그
        """
        ttl = self.default_ttl if ttl is None else ttl
        self._untag(key)
        self._store[key] = (time.monotonic() + ttl, ttl, value)
        for tag in tags or ():
            self._tags.setdefault(tag, set()).add(key)
            self._key_tags.setdefault(key, set()).add(tag)

    def set_with_ttl(self, key: str, ttl: float, value: Any) -> None:
        self.set(key, value, ttl=ttl)

    def delete(self, key: str) -> bool:
        """특정 키를 삭제합니다. 존재했는지 여부를 반환."""
        if key in self._store:
            self._remove(key)
            return True
        return False

    def invalidate_prefix(self, prefix: str) -> int:
        """특정 접두사로 시작하는 모든 캐시를 무효화합니다."""
        keys_to_delete = [k for k in self._store if k.startswith(prefix)]
        for key in keys_to_delete:
            self._remove(key)
        return len(keys_to_delete)

    def invalidate_tag(self, tag: str) -> int:
        """태그에 등록된 모든 캐시를 무효화합니다."""
        keys = list(self._tags.pop(tag, set()))
        for key in keys:
            self._remove(key)
        return len(keys)

    def ttl_of(self, key: str) -> Optional[float]:
        """살아있는 엔트리가 저장될 때 사용된 TTL."""
        if self.get(key) is None:
            return None
        return self._store[key][1]

    def lock_for(self, key: str) -> asyncio.Lock:
        """키별 single-flight 락 (없으면 생성)."""
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def purge_expired(self) -> int:
        """만료된 엔트리를 일괄 정리합니다. 정리된 개수 반환."""
        now = time.monotonic()
        expired = [k for k, (expire_at, _, _) in self._store.items() if now >= expire_at]
        for key in expired:
            self._remove(key)

        idle_locks = [k for k, lock in self._locks.items() if not lock.locked() and k not in self._store]
        for key in idle_locks:
            del self._locks[key]
        return len(expired)

    def clear(self) -> None:
        """모든 캐시를 초기화합니다."""
        count = len(self._store)
        self._store.clear()
        self._tags.clear()
        self._key_tags.clear()
        logger.info(f"캐시 초기화: {count}건 삭제")

    def stats(self) -> dict:
        """캐시 통계를 반환합니다."""
        now = time.monotonic()
        total = len(self._store)
        active = sum(1 for expire_at, _, _ in self._store.values() if now < expire_at)
        return {
            "total_keys": total,
            "active_keys": active,
            "expired_keys": total - active,
            "tags": {tag: len(keys) for tag, keys in self._tags.items()},
        }

    def _remove(self, key: str) -> None:
        self._store.pop(key, None)
        self._untag(key)

    def _untag(self, key: str) -> None:
        for tag in self._key_tags.pop(key, set()):
            keys = self._tags.get(tag)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._tags[tag]


def get_cache(request: Request) -> APICache:
    """앱 수명주기에서 생성된 캐시 인스턴스 의존성."""
    return request.app.state.cache
