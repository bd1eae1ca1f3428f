# services/youtube/schemas.py - Response models for the YouTube Data API
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class ResourceId(BaseModel):
    kind: Optional[str] = None
    videoId: Optional[str] = None


class PlaylistItemSnippet(BaseModel):
    publishedAt: Optional[datetime] = None
    title: Optional[str] = None
    resourceId: Optional[ResourceId] = None


class PlaylistItem(BaseModel):
    id: Optional[str] = None
    snippet: Optional[PlaylistItemSnippet] = None


class PlaylistItemListResponse(BaseModel):
    items: List[PlaylistItem] = []
    nextPageToken: Optional[str] = None


class LiveStreamingDetails(BaseModel):
    scheduledStartTime: Optional[datetime] = None
    actualStartTime: Optional[datetime] = None
    actualEndTime: Optional[datetime] = None


class VideoSnippet(BaseModel):
    title: str = ""
    channelTitle: str = ""
    categoryId: str = ""


class Video(BaseModel):
    id: str
    snippet: VideoSnippet = VideoSnippet()
    liveStreamingDetails: Optional[LiveStreamingDetails] = None


class VideoListResponse(BaseModel):
    items: List[Video] = []


class VideoCategorySnippet(BaseModel):
    title: str
    assignable: Optional[bool] = None


class VideoCategory(BaseModel):
    id: str
    snippet: VideoCategorySnippet


class VideoCategoryListResponse(BaseModel):
    items: List[VideoCategory] = []
