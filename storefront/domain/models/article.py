from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Dict, Literal, Optional

from storefront.domain.models.product import Maker

ArticleType = Literal["news", "knowledge", "blog"]
ARTICLE_TYPES = ("news", "knowledge", "blog")

# Background styles of knowledge cards
KNOWLEDGE_ICONS = ("square", "circle", "gradient")

ID_PREFIXES: Dict[str, str] = {"news": "n_", "knowledge": "k_", "blog": "b_"}


class Article(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = ""
    type: ArticleType = "news"
    title: str = ""
    excerpt: str = ""
    content: str = ""                   # full body, blog only
    image: str = ""
    icon: str = ""                      # knowledge only
    publish_date: str = ""              # blog only
    read_time: str = ""                 # blog only

    created_at: str = ""
    updated_at: str = ""
    created_by: Optional[Maker] = None
    updated_by: Optional[Maker] = None

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True)
