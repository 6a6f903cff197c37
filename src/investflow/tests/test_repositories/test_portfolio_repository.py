import pytest

from investflow.exceptions import DuplicateError
from investflow.models.portfolio import Portfolio


@pytest.mark.asyncio
class TestPortfolioRepositoryNames:

    async def test_exists_by_name(self, portfolio_repository, created_portfolio):
        assert await portfolio_repository.exists_by_name(created_portfolio.name) is True
        assert await portfolio_repository.exists_by_name("Nobody's Portfolio") is False

    async def test_exists_by_name_is_exact_match(self, portfolio_repository, create_portfolio):
        await create_portfolio(name="Growth")

        assert await portfolio_repository.exists_by_name("growth") is False
        assert await portfolio_repository.exists_by_name("Growth ") is False

    async def test_exists_by_name_excluding_ignores_own_row(self, portfolio_repository, create_portfolio):
        """
        Behavior:
                - A portfolio keeping its own name is not a conflict.
                - Another portfolio holding the name is.
        """
        mine = await create_portfolio(name="Mine")
        theirs = await create_portfolio(name="Theirs")

        assert await portfolio_repository.exists_by_name_excluding("Mine", mine.id) is False
        assert await portfolio_repository.exists_by_name_excluding("Theirs", mine.id) is True
        assert await portfolio_repository.exists_by_name_excluding("Free", theirs.id) is False


@pytest.mark.asyncio
class TestPortfolioRepositoryCollaborator:

    async def test_save_assigns_store_fields(self, portfolio_repository):
        entity = Portfolio(name="Fresh", monthly_amount=120.0, duration_months=10)
        assert entity.id is None

        saved = await portfolio_repository.save(entity)

        assert saved is entity
        assert saved.id is not None
        assert saved.created_at is not None
        assert saved.updated_at == saved.created_at

    async def test_save_duplicate_raises_duplicate_error(self, portfolio_repository, created_portfolio):
        with pytest.raises(DuplicateError) as exc_info:
            await portfolio_repository.save(
                Portfolio(name=created_portfolio.name, monthly_amount=1.0, duration_months=1)
            )

        assert exc_info.value.fields == ["name"]

    async def test_find_by_id(self, portfolio_repository, created_portfolio):
        found = await portfolio_repository.find_by_id(created_portfolio.id)

        assert found is not None
        assert found.name == created_portfolio.name
        assert await portfolio_repository.find_by_id(999) is None

    async def test_find_all(self, portfolio_repository, multiple_portfolios):
        found = await portfolio_repository.find_all()

        assert {p.id for p in found} == {p.id for p in multiple_portfolios}

    async def test_find_all_has_no_page_limit(self, portfolio_repository, create_portfolio):
        for _ in range(105):
            await create_portfolio()

        assert len(await portfolio_repository.find_all()) == 105

    async def test_find_all_empty(self, portfolio_repository):
        assert await portfolio_repository.find_all() == []

    async def test_exists_and_delete_by_id(self, portfolio_repository, created_portfolio):
        assert await portfolio_repository.exists_by_id(created_portfolio.id) is True

        assert await portfolio_repository.delete_by_id(created_portfolio.id) is True

        assert await portfolio_repository.exists_by_id(created_portfolio.id) is False
        assert await portfolio_repository.delete_by_id(created_portfolio.id) is False
