from pydantic_settings import BaseSettings, SettingsConfigDict

from jitai.models import SourceTag


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── 数据源开关（由外层应用控制）────────────────────────────────────────────
    hdic_enabled: bool = True
    hng_enabled: bool = True
    nijl_enabled: bool = True
    uthi_enabled: bool = True
    # 是否检索代表字形（异体字）；仅 NIJL / UTHI 支持
    search_delegate: bool = False

    # ── 远程服务地址 ─────────────────────────────────────────────────────────
    hdic_base_url: str = "https://viewer.hdic.jp"
    hng_base_url: str = "https://search.hng-data.org"
    nijl_base_url: str = "https://lab.nijl.ac.jp"
    uthi_base_url: str = "https://clioapi.hi.u-tokyo.ac.jp"
    uthi_viewer_base_url: str = "https://clioimg.hi.u-tokyo.ac.jp"
    hutime_url: str = "https://ap.hutime.org/cal"

    # HTTP
    http_timeout: float = 20.0
    user_agent: str = "Jitai/0.1"

    # UTHI 分页：每页 100 条；max_pages 防止远端一直报告大总数
    uthi_page_size: int = 100
    uthi_max_pages: int = 50

    # HuTime 历法转换：1001.1 = 日本和历，101.1 = 前推格里历
    hutime_input_calendar: str = "1001.1"
    hutime_output_calendar: str = "101.1"

    # NIJL 书目 → 年代对照表（JSON）；空则所有命中都会 LookupMiss
    nijl_book_table_path: str = ""

    @property
    def enabled_sources(self) -> set[SourceTag]:
        flags = {
            SourceTag.HDIC: self.hdic_enabled,
            SourceTag.HNG: self.hng_enabled,
            SourceTag.NIJL: self.nijl_enabled,
            SourceTag.UTHI: self.uthi_enabled,
        }
        return {tag for tag, on in flags.items() if on}


settings = Settings()
