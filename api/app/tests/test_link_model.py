from __future__ import annotations

import pytest
from sqlalchemy import select

from app.models.link import Link, LinkValidationError


def test_metadata_accessors_read_and_write_the_document() -> None:
    link = Link(url="https://example.com", meta_data={"title": "T"})

    assert link.title == "T"
    assert link.description is None
    assert link.image is None

    link.image = "https://img/x.png"
    link.title = "New"

    assert link.meta_data == {"title": "New", "image": "https://img/x.png"}


@pytest.mark.parametrize("url", ["", "   ", None])
def test_blank_url_is_rejected(url) -> None:
    with pytest.raises(LinkValidationError):
        Link(url=url)


@pytest.mark.asyncio
async def test_metadata_round_trips_through_json_column(session) -> None:
    link = Link(url="https://example.com/article")
    link.description = "D"
    link.image = "https://img/x.png"
    session.add(link)
    await session.commit()

    result = await session.execute(select(Link).where(Link.id == link.id).execution_options(populate_existing=True))
    stored = result.scalar_one()
    assert stored.meta_data == {"description": "D", "image": "https://img/x.png"}
    assert stored.title is None
