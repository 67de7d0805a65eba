"""Fetch schedule, student and settings documents from Firestore over REST."""

import logging

import httpx

from reminders.records import parse_document

logger = logging.getLogger(__name__)

FIRESTORE_HOST = "https://firestore.googleapis.com"
COLLECTION_NAME = "system_data"
PAGE_SIZE = 200


class DataSourceError(Exception):
    """Raised when fetching from Firestore fails."""

    pass


def _get_collection_url(project_id: str, collection: str) -> str:
    return (
        f"{FIRESTORE_HOST}/v1/projects/{project_id}"
        f"/databases/(default)/documents/{collection}"
    )


async def fetch_documents(
    project_id: str,
    api_key: str,
    collection: str = COLLECTION_NAME,
    timeout: float = 5.0,
) -> list[dict]:
    """
    Fetch every document in a collection and flatten it.

    Follows nextPageToken until the collection is exhausted.

    Args:
        project_id: Firebase project ID
        api_key: Firebase Web API key
        collection: Collection name
        timeout: Per-request timeout in seconds

    Returns:
        List of flat records in Firestore order

    Raises:
        DataSourceError: On transport errors, non-200 responses or bad JSON
    """
    url = _get_collection_url(project_id, collection)
    params = {"key": api_key, "pageSize": PAGE_SIZE}
    records: list[dict] = []

    async with httpx.AsyncClient(timeout=httpx.Timeout(timeout)) as client:
        while True:
            try:
                response = await client.get(url, params=params)
            except httpx.HTTPError as e:
                raise DataSourceError(f"Firestore request failed: {e}") from e

            if response.status_code != 200:
                raise DataSourceError(
                    f"Firestore returned {response.status_code}: {response.text}"
                )

            try:
                payload = response.json()
            except ValueError as e:
                raise DataSourceError(f"Firestore returned invalid JSON: {e}") from e

            records.extend(parse_document(doc) for doc in payload.get("documents", []))

            page_token = payload.get("nextPageToken")
            if not page_token:
                break
            params = {**params, "pageToken": page_token}

    logger.info(f"Fetched {len(records)} documents from {collection}")
    return records
