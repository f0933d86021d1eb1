"""Character record modeled by the digital twin.

Mirrors the agent runtime's character file format. Field aliases keep the
runtime's camelCase names, which is also how the fields are listed in the
modeler prompt.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field


class MessageContent(BaseModel):
    """Content of an example message."""

    model_config = {"extra": "allow"}

    text: Optional[str] = Field(default=None, description="The message text")
    actions: Optional[list[str]] = Field(default=None, description="Actions taken with the message")


class MessageExample(BaseModel):
    """One message of an example conversation."""

    name: str = Field(description="Name of the speaker")
    content: MessageContent


class KnowledgePath(BaseModel):
    path: str
    shared: Optional[bool] = None


class KnowledgeDirectory(BaseModel):
    directory: str
    shared: Optional[bool] = None


class Style(BaseModel):
    all: Optional[list[str]] = Field(default=None, description="Style rules for every response")
    chat: Optional[list[str]] = Field(default=None, description="Style rules for chat replies")
    post: Optional[list[str]] = Field(default=None, description="Style rules for social posts")


SettingValue = Union[str, bool, float, dict]


class Character(BaseModel):
    """Complete character definition"""

    model_config = {"populate_by_name": True}

    id: Optional[str] = Field(default=None, description="Unique identifier for the character")
    name: str = Field(min_length=1, description="The name of the character")
    username: Optional[str] = Field(
        default=None, description="Username for the character on various platforms"
    )
    system: Optional[str] = Field(
        default=None, description="System prompt that defines the character's core behavior"
    )
    templates: Optional[dict[str, str]] = Field(
        default=None, description="Templates for generating different types of content"
    )
    bio: Union[str, list[str]] = Field(
        description="Character biography - can be a single string or array of biography points"
    )
    message_examples: Optional[list[list[MessageExample]]] = Field(
        default=None,
        alias="messageExamples",
        description="Example conversations for training the character",
    )
    post_examples: Optional[list[str]] = Field(
        default=None, alias="postExamples", description="Example social media posts"
    )
    topics: Optional[list[str]] = Field(
        default=None, description="Topics the character is knowledgeable about"
    )
    adjectives: Optional[list[str]] = Field(
        default=None, description="Adjectives that describe the character's personality"
    )
    knowledge: Optional[list[Union[str, KnowledgePath, KnowledgeDirectory]]] = Field(
        default=None,
        description="Knowledge sources (files, directories) the character can access",
    )
    plugins: Optional[list[str]] = Field(
        default=None, description="List of plugin package names to load"
    )
    settings: Optional[dict[str, SettingValue]] = Field(
        default=None, description="Character-specific settings"
    )
    secrets: Optional[dict[str, Union[str, bool, float]]] = Field(
        default=None, description="Secret values and API keys"
    )
    style: Optional[Style] = Field(default=None, description="Writing style guides")
