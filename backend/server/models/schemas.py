from typing import List, Optional, Union

from pydantic import BaseModel, Field


class MovieDraftRequest(BaseModel):
    """新增/编辑电影请求模型"""
    name: str = Field(..., description="电影名称（必填，去除首尾空白后不能为空）")
    language: Optional[str] = Field(default="", description="语言（可选）")
    platform: Optional[str] = Field(default="", description="平台（可选）")
    # Either a list of names or the raw comma separated form input.
    cast: Union[List[str], str, None] = Field(default=None, description="演员列表或逗号分隔字符串")


class ImportResponse(BaseModel):
    """导入结果"""
    movies: int
    watchedMovies: int
    movieLogs: int


class FolderSaveResponse(BaseModel):
    filename: str


class FolderLoadResponse(BaseModel):
    movies: int
