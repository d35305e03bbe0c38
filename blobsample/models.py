"""
Blob Storage Models

Value records describing remote containers, blobs, blocks and page ranges,
plus the results each blob workflow reports back to the driver.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator

from .utils.validation import validate_page_range


class PublicAccess(str, Enum):
    """Container access level."""
    PRIVATE = "private"
    BLOB = "blob"
    CONTAINER = "container"


class BlobKind(str, Enum):
    APPEND = "AppendBlob"
    BLOCK = "BlockBlob"
    PAGE = "PageBlob"


class BlockState(str, Enum):
    COMMITTED = "Committed"
    UNCOMMITTED = "Uncommitted"


class BlockListFilter(str, Enum):
    ALL = "all"
    COMMITTED = "committed"
    UNCOMMITTED = "uncommitted"


class PageWriteMode(str, Enum):
    UPDATE = "update"
    CLEAR = "clear"


class BlockInfo(BaseModel):
    """A block of a block blob as reported by the service."""

    block_id: str = Field(..., description="Opaque, base64-safe block identifier")
    size: int = Field(default=0, ge=0)
    state: BlockState


class BlockList(BaseModel):
    """Committed and uncommitted blocks of a block blob, each in service order."""

    committed: List[BlockInfo] = Field(default_factory=list)
    uncommitted: List[BlockInfo] = Field(default_factory=list)

    @property
    def committed_ids(self) -> List[str]:
        return [block.block_id for block in self.committed]

    @property
    def uncommitted_ids(self) -> List[str]:
        return [block.block_id for block in self.uncommitted]


class PageRange(BaseModel):
    """An inclusive, page-aligned byte interval of a page blob."""

    start: int = Field(..., ge=0)
    end: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_alignment(self):
        validate_page_range(self.start, self.end)
        return self

    @property
    def length(self) -> int:
        return self.end - self.start + 1


class BlobItem(BaseModel):
    """Listing entry for a blob inside a container."""

    name: str
    kind: Optional[BlobKind] = None
    size: int = 0


class AppendBlobResult(BaseModel):
    blob_name: str
    payload: bytes
    local_path: str


class BlockBlobResult(BaseModel):
    blob_name: str
    block_id: str
    payload: bytes
    before_commit: BlockList
    after_commit: BlockList
    local_path: str


class PageBlobResult(BaseModel):
    blob_name: str
    blob_length: int
    written: PageRange
    page_ranges: List[PageRange]
    local_path: str
