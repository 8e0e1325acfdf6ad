#!/usr/bin/env python
"""
Pydantic DTOs for the catalog's playlist document.

Field names follow the Web API JSON so the proxy response can be validated
as-is; fields the player does not use are ignored.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CatalogModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Image(_CatalogModel):
    url: str
    height: Optional[int] = None
    width: Optional[int] = None


class Artist(_CatalogModel):
    id: Optional[str] = None
    name: str
    uri: Optional[str] = None
    href: Optional[str] = None


class Album(_CatalogModel):
    id: Optional[str] = None
    name: str = ""
    images: List[Image] = Field(default_factory=list)
    release_date: Optional[str] = None
    uri: Optional[str] = None

    # Playlists and albums without a cover come back with images: null
    @field_validator("images", mode="before")
    @classmethod
    def _null_images(cls, value: object) -> object:
        return [] if value is None else value


class Track(_CatalogModel):
    id: Optional[str] = None
    name: str
    artists: List[Artist] = Field(default_factory=list)
    album: Album = Field(default_factory=Album)
    duration_ms: int = Field(default=0, ge=0)
    preview_url: Optional[str] = None
    uri: Optional[str] = None
    track_number: Optional[int] = None

    @field_validator("artists", mode="before")
    @classmethod
    def _null_artists(cls, value: object) -> object:
        return [] if value is None else value

    @property
    def has_preview(self) -> bool:
        return bool(self.preview_url)

    @property
    def artist_names(self) -> str:
        return ", ".join(artist.name for artist in self.artists)


class PlaylistItem(_CatalogModel):
    added_at: Optional[str] = None
    # null for removed or local-only entries
    track: Optional[Track] = None


class PlaylistTracks(_CatalogModel):
    total: int = 0
    items: List[PlaylistItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _null_items(cls, value: object) -> object:
        return [] if value is None else value


class Owner(_CatalogModel):
    id: str
    display_name: Optional[str] = None


class Playlist(_CatalogModel):
    id: str
    name: str
    description: Optional[str] = None
    images: List[Image] = Field(default_factory=list)
    tracks: PlaylistTracks = Field(default_factory=PlaylistTracks)
    owner: Optional[Owner] = None
    uri: Optional[str] = None

    @field_validator("images", mode="before")
    @classmethod
    def _null_images(cls, value: object) -> object:
        return [] if value is None else value

    def track_list(self) -> List[Track]:
        return [item.track for item in self.tracks.items if item.track is not None]


__all__ = [
    "Image",
    "Artist",
    "Album",
    "Track",
    "PlaylistItem",
    "PlaylistTracks",
    "Owner",
    "Playlist",
]
