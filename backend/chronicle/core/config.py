from __future__ import annotations

import os
from pydantic_settings import BaseSettings


# Chronicle 运行配置：环境变量优先，其次 .env 文件，最后是这里的默认值
class Settings(BaseSettings):
    # dev / prod；非 dev 环境拒绝未知配置项
    app_env: str = "dev"
    # 部署在子路径下时的根路径
    root_path: str = ""
    # 路由前缀；未设置时由 resolved_api_prefix 推导
    api_prefix: str | None = None
    # 运行时数据目录
    data_dir: str = "data"
    # 内容库 SQLite 文件
    sqlite_path: str = "data/chronicle.db"
    # 设置后覆盖 sqlite_path
    database_url: str | None = None

    # 静态资源根目录（编译后的书籍、上传图片）
    public_dir: str = "public"
    # 编译后 PDF 的输出目录，对外映射为 /books
    books_dir: str = "public/books"
    # 上传图片的存放目录
    uploads_dir: str = "public/uploads"
    # 图片访问 URL 前缀，对应 uploads_dir
    uploads_url_prefix: str = "/uploads"

    # 无关联文章的章节，自动摘要截取长度
    excerpt_length: int = 200

    # 日志级别
    log_level: str = "INFO"

    # 编辑器前端地址
    cors_origins: str = "http://localhost:3000"

    # .env 查找顺序：CHRONICLE_ENV_FILE、config/、backend/config/、当前目录
    class Config:
        env_file = (
            os.getenv("CHRONICLE_ENV_FILE") or "config/.env",
            "backend/config/.env",
            ".env",
        )
        case_sensitive = False
        extra = "ignore" if os.getenv("APP_ENV", "dev").lower() == "dev" else "forbid"

    # 逗号分隔的 CORS 来源 -> 列表
    @property
    def cors_origin_list(self) -> list[str]:
        return [item.strip() for item in self.cors_origins.split(",") if item.strip()]

    # 子路径部署时不再叠加 /api
    @property
    def resolved_api_prefix(self) -> str:
        prefix = self.api_prefix
        if prefix is None:
            prefix = "" if (self.root_path or "").strip() else "/api"
        return prefix.rstrip("/")

    # 启动时创建数据与输出目录
    def ensure_dirs(self) -> None:
        for path in (
            self.data_dir,
            self.public_dir,
            self.books_dir,
            self.uploads_dir,
            os.path.dirname(self.sqlite_path),
        ):
            if path:
                os.makedirs(path, exist_ok=True)


settings = Settings()
