"""Person details use case."""

from __future__ import annotations

import asyncio
import dataclasses

import structlog

from moviedb.domain.entities.media import FilmographyCredit, PersonDetails
from moviedb.domain.entities.result import AppResult, Failure, map_result
from moviedb.domain.ports.language import LanguageProviderPort
from moviedb.domain.ports.remote import RemoteDataSourcePort

log = structlog.get_logger(__name__)


class PersonRepository:
    """Fetches a person and their combined credits in parallel.

    Not cached. A failed credits request degrades to an empty filmography;
    a failed details request fails the whole call.
    """

    def __init__(
        self, *, remote: RemoteDataSourcePort, language: LanguageProviderPort
    ) -> None:
        self._remote = remote
        self._language = language

    async def get_person_details(self, person_id: int) -> AppResult[PersonDetails]:
        language = self._language.api_language()
        details, credits = await asyncio.gather(
            self._remote.fetch_person(person_id, language),
            self._remote.fetch_person_credits(person_id, language),
        )
        if isinstance(details, Failure):
            log.warning(
                "person_details_failed", person_id=person_id, error=details.kind
            )
            return details

        filmography: list[FilmographyCredit] = []
        if isinstance(credits, Failure):
            log.info(
                "person_credits_unavailable", person_id=person_id, error=credits.kind
            )
        else:
            filmography = credits.data

        return map_result(
            details, lambda person: dataclasses.replace(person, filmography=filmography)
        )
