from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from ..models import NewsRecord
from .base import BaseProvider


class MockProvider(BaseProvider):
    """Returns hard-coded Turkish news records for offline development."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self._now = now

    def fetch(self, source: Optional[str] = None, limit: Optional[int] = None) -> Iterable[NewsRecord]:
        records = [record for record in self.sample() if not source or record.source == source]
        return records[:limit] if limit else records

    def sample(self) -> List[NewsRecord]:
        now = self._now or datetime.now(timezone.utc)
        return [
            NewsRecord.create(
                title="Merkez Bankası faiz kararını açıkladı",
                link="https://example.com/ekonomi/faiz-karari",
                source="example.com",
                published_at=now - timedelta(hours=1),
                category="Ekonomi",
                description="Merkez Bankası politika faizini sabit tuttu.",
                content=(
                    "Merkez Bankası politika faizini yüzde kırk beş seviyesinde sabit tuttu. "
                    "Karar piyasalarda beklentilere uygun bulundu ve borsada yükseliş görüldü. "
                    "Ekonomistler enflasyon verilerinin önümüzdeki aylarda belirleyici olacağını söyledi. "
                    "Kurul bir sonraki toplantının tarihini de duyurdu."
                ),
            ),
            NewsRecord.create(
                title="Merkez Bankası faiz kararını açıkladı",
                link="https://example.org/haber/merkez-bankasi-faiz",
                source="example.org",
                published_at=now - timedelta(hours=2),
                category="Ekonomi",
            ),
            NewsRecord.create(
                title="Kuzey Ege'de şiddetli deprem korkuttu",
                link="https://example.com/gundem/deprem",
                source="example.com",
                published_at=now - timedelta(hours=3),
                category="Gündem",
                description="Bölgede hasar tespit çalışmaları sürüyor.",
                content=(
                    "Kuzey Ege açıklarında meydana gelen deprem çevre illerde de hissedildi. "
                    "Yetkililer can kaybı olmadığını açıkladı. "
                    "Bölgede hasar tespit çalışmaları sürüyor."
                ),
            ),
            NewsRecord.create(
                title="Milli takım Avrupa şampiyonasında rekor kırdı",
                link="https://example.net/spor/milli-takim-rekor",
                source="example.net",
                published_at=now - timedelta(days=1),
                category="Spor",
                description="Takım tarihindeki en büyük başarıya imza attı.",
            ),
        ]
