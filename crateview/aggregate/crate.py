"""Client-side aggregate over a crate record and its related collections."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple

from crateview.aggregate.actions import MutationActions
from crateview.aggregate.snapshot import RelationSnapshotCache
from crateview.aggregate.views import DerivedViewCache
from crateview.models import Category, Crate, Keyword, Owner, User, Version, WriteResponse
from crateview.network.base import RelationLoader, RelationName, WriteClient
from crateview.runtime.contracts import PreconditionReporter
from crateview.runtime.tasks import BackgroundTask

LOGGER = logging.getLogger(__name__)


def _versions_slot(reload: bool = False) -> Tuple[str, bool]:
    return ("load_versions", reload is True)


class CrateAggregate:
    """A crate plus its versions and owners as currently materialized.

    Relations are only (re)populated through the ``load_*`` tasks. Derived
    views are read through plain properties and recomputed lazily when the
    versions relation installs a new materialized set.
    """

    def __init__(
        self,
        record: Crate,
        loader: RelationLoader,
        write_client: WriteClient,
        *,
        reporter: Optional[PreconditionReporter] = None,
    ) -> None:
        self.record = record
        self.loader = loader
        self.reporter = reporter or PreconditionReporter()
        self.actions = MutationActions(crate_name=record.name, client=write_client)
        self._versions = RelationSnapshotCache(loader, RelationName.VERSIONS.value)
        self.views = DerivedViewCache(self._versions)

        self.load_owner_user_task: BackgroundTask[List[User]] = BackgroundTask(
            "load_owner_user", self._load_owner_user
        )
        self.load_owners_task: BackgroundTask[List[Owner]] = BackgroundTask("load_owners", self._load_owners)
        self.load_versions_task: BackgroundTask[List[Version]] = BackgroundTask(
            "load_versions", self._load_versions, key_func=_versions_slot
        )
        self.load_keywords_task: BackgroundTask[List[Keyword]] = BackgroundTask(
            "load_keywords", self._load_relation(RelationName.KEYWORDS)
        )
        self.load_categories_task: BackgroundTask[List[Category]] = BackgroundTask(
            "load_categories", self._load_relation(RelationName.CATEGORIES)
        )

    def __repr__(self) -> str:
        return f"<CrateAggregate {self.record.name!r}>"

    @property
    def name(self) -> str:
        return self.record.name

    # -- versions -------------------------------------------------------

    @property
    def versions_by_id(self) -> Mapping[int, Version]:
        return self._versions.by_id

    @property
    def loaded_versions_by_num(self) -> Mapping[str, Version]:
        return self._versions.by_num

    @property
    def version_ids_by_semver(self) -> Tuple[int, ...]:
        return self.views.version_ids_by_semver

    @property
    def version_ids_by_date(self) -> Tuple[int, ...]:
        return self.views.version_ids_by_date

    @property
    def release_track_set(self) -> FrozenSet[int]:
        return self.views.release_track_set

    async def load_versions(self, *, reload: bool = False) -> List[Version]:
        return await self.load_versions_task.perform(reload=reload)

    async def _load_versions(self, reload: bool = False) -> List[Version]:
        relation = RelationName.VERSIONS.value
        if reload is True:
            records = await self.loader.reload(relation)
        else:
            records = await self.loader.load(relation)
        return list(records or [])

    # -- owners ---------------------------------------------------------

    def has_owner_user(self, user_id: int) -> bool:
        task = self.load_owner_user_task
        self.reporter.check(
            task.last is not None,
            "`load_owner_user()` must be called before calling `has_owner_user()`",
        )
        return any(user.id == user_id for user in self._latest(task))

    @property
    def owners(self) -> List[Owner]:
        task = self.load_owners_task
        self.reporter.check(
            task.last is not None,
            "`load_owners()` must be called before accessing `owners`",
        )
        return self._latest(task)

    async def load_owner_user(self) -> List[User]:
        return await self.load_owner_user_task.perform()

    async def load_owners(self) -> List[Owner]:
        return await self.load_owners_task.perform()

    async def _load_owner_user(self) -> List[User]:
        users = await self.loader.reload(RelationName.OWNER_USER.value)
        return list(users or [])

    async def _load_owners(self) -> List[Owner]:
        teams, users = await asyncio.gather(
            self.loader.reload(RelationName.OWNER_TEAM.value),
            self.loader.reload(RelationName.OWNER_USER.value),
        )
        return [*(teams or []), *(users or [])]

    # -- keywords / categories -----------------------------------------

    @property
    def keywords(self) -> List[Keyword]:
        task = self.load_keywords_task
        self.reporter.check(task.last is not None, "`load_keywords()` must be called before accessing `keywords`")
        return self._latest(task)

    @property
    def categories(self) -> List[Category]:
        task = self.load_categories_task
        self.reporter.check(task.last is not None, "`load_categories()` must be called before accessing `categories`")
        return self._latest(task)

    async def load_keywords(self) -> List[Keyword]:
        return await self.load_keywords_task.perform()

    async def load_categories(self) -> List[Category]:
        return await self.load_categories_task.perform()

    def _load_relation(self, relation: RelationName):
        async def _load() -> List[Any]:
            return list(await self.loader.load(relation.value) or [])

        return _load

    # -- writes ---------------------------------------------------------

    async def follow(self) -> WriteResponse:
        return await self.actions.follow()

    async def unfollow(self) -> WriteResponse:
        return await self.actions.unfollow()

    async def invite_owner(self, username: str) -> WriteResponse:
        return await self.actions.invite_owner(username)

    async def remove_owner(self, username: str) -> WriteResponse:
        return await self.actions.remove_owner(username)

    @staticmethod
    def _latest(task: BackgroundTask[Any]) -> List[Any]:
        instance = task.last_successful
        if instance is None:
            return []
        return list(instance.value or [])
