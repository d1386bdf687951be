"""AOClient - entry point for talking to the AO network."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from types import TracebackType

from ao_mcp.connect._http import HTTPClient
from ao_mcp.connect.signer import DataItemSigner
from ao_mcp.connect.types import (
    MessageReceipt,
    ResultPayload,
    ResultsPage,
    SortOrder,
    Tag,
)

logger = logging.getLogger("ao_mcp.connect")

DEFAULT_CU_URL = "https://cu.ao-testnet.xyz"
DEFAULT_MU_URL = "https://mu.ao-testnet.xyz"

DEFAULT_SPAWN_DATA = "1984"

_DRYRUN_PLACEHOLDER_ID = "1234"


def _protocol_tags(message_type: str, *, sdk: bool = True) -> list[Tag]:
    tags = [
        Tag(name="Data-Protocol", value="ao"),
        Tag(name="Variant", value="ao.TN.1"),
        Tag(name="Type", value=message_type),
    ]
    if sdk:
        tags.append(Tag(name="SDK", value="aoconnect"))
    return tags


class AOClient:
    """Client for AO compute (CU) and messenger (MU) units.

    Reads (dry-run, result, results) go to the compute unit; signed
    submissions (message, spawn) go to the messenger unit. Use as an async
    context manager to ensure connection pools are closed.

    Example:
        async with AOClient() as client:
            response = await client.dryrun(
                process_id, tags=[Tag(name="Action", value="Info")]
            )
    """

    def __init__(
        self,
        cu_url: str = DEFAULT_CU_URL,
        mu_url: str = DEFAULT_MU_URL,
        *,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        self._cu_url = cu_url
        self._mu_url = mu_url
        self._timeout = timeout
        self._max_retries = max_retries
        self._cu: HTTPClient | None = None
        self._mu: HTTPClient | None = None

    async def __aenter__(self) -> AOClient:
        """Enter async context, initializing both unit clients."""
        self._cu = HTTPClient(
            self._cu_url, timeout=self._timeout, max_retries=self._max_retries
        )
        self._mu = HTTPClient(
            self._mu_url, timeout=self._timeout, max_retries=self._max_retries
        )
        await self._cu.__aenter__()
        await self._mu.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context, closing both unit clients."""
        if self._cu:
            await self._cu.__aexit__(exc_type, exc_val, exc_tb)
            self._cu = None
        if self._mu:
            await self._mu.__aexit__(exc_type, exc_val, exc_tb)
            self._mu = None

    @property
    def cu(self) -> HTTPClient:
        if self._cu is None:
            raise RuntimeError("AOClient not initialized. Use 'async with' context.")
        return self._cu

    @property
    def mu(self) -> HTTPClient:
        if self._mu is None:
            raise RuntimeError("AOClient not initialized. Use 'async with' context.")
        return self._mu

    # Reads

    async def dryrun(
        self,
        process_id: str,
        *,
        tags: Sequence[Tag],
        data: str = "",
    ) -> ResultPayload:
        """Evaluate a message against a process without persisting it.

        Args:
            process_id: Target process ID
            tags: Message tags; protocol tags are appended after them
            data: Message data

        Returns:
            Evaluation outcome
        """
        all_tags = [*tags, *_protocol_tags("Message", sdk=False)]
        body = {
            "Id": _DRYRUN_PLACEHOLDER_ID,
            "Target": process_id,
            "Owner": _DRYRUN_PLACEHOLDER_ID,
            "Anchor": "0",
            "Data": data,
            "Tags": [tag.model_dump() for tag in all_tags],
        }
        response = await self.cu.post(
            "/dry-run", json=body, params={"process-id": process_id}
        )
        return ResultPayload.model_validate(response)

    async def result(self, process_id: str, message_id: str) -> ResultPayload:
        """Fetch the evaluation outcome of a previously submitted message."""
        response = await self.cu.get(
            f"/result/{message_id}", params={"process-id": process_id}
        )
        return ResultPayload.model_validate(response)

    async def results(
        self,
        process_id: str,
        *,
        limit: int | None = None,
        from_cursor: str | None = None,
        to_cursor: str | None = None,
        sort: SortOrder | str = SortOrder.ASC,
    ) -> ResultsPage:
        """List a process's evaluated results.

        Args:
            process_id: Process ID
            limit: Max edges to return
            from_cursor: Cursor to start after (exclusive)
            to_cursor: Cursor to stop at
            sort: ASC (oldest first) or DESC (newest first)

        Returns:
            ResultsPage with edges in the requested order
        """
        sort_str = sort.value if isinstance(sort, SortOrder) else sort
        response = await self.cu.get(
            f"/results/{process_id}",
            params={
                "limit": limit,
                "from": from_cursor,
                "to": to_cursor,
                "sort": sort_str,
            },
        )
        return ResultsPage.model_validate(response)

    # Signed submissions

    async def _submit(self, item_bytes: bytes, local_id: str) -> str:
        response = await self.mu.post_bytes("/", content=item_bytes)
        receipt = MessageReceipt.model_validate(response)
        return receipt.id or local_id

    async def message(
        self,
        process_id: str,
        *,
        signer: DataItemSigner,
        tags: Sequence[Tag],
        data: str = "",
        anchor: bytes | None = None,
    ) -> str:
        """Sign and submit a message to a process.

        Returns:
            The message ID
        """
        item = await asyncio.to_thread(
            signer.sign_data_item,
            data=data,
            tags=[*tags, *_protocol_tags("Message")],
            target=process_id,
            anchor=anchor,
        )
        message_id = await self._submit(item.to_bytes(), item.id)
        logger.info("message_submitted process_id=%s message_id=%s", process_id, message_id)
        return message_id

    async def spawn(
        self,
        *,
        module: str,
        scheduler: str,
        signer: DataItemSigner,
        tags: Sequence[Tag] = (),
        data: str = DEFAULT_SPAWN_DATA,
    ) -> str:
        """Sign and submit a process spawn.

        Returns:
            The new process ID
        """
        item = await asyncio.to_thread(
            signer.sign_data_item,
            data=data,
            tags=[
                *tags,
                *_protocol_tags("Process"),
                Tag(name="Module", value=module),
                Tag(name="Scheduler", value=scheduler),
            ],
        )
        process_id = await self._submit(item.to_bytes(), item.id)
        logger.info("process_spawned process_id=%s module=%s", process_id, module)
        return process_id
