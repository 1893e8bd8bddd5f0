"""Analysis prompt

章節標題與 renderer/sections.py 的預設規則互相對應：
- 第 4 節「技術走勢分析」觸發線圖插入，並附上 [DATA_START] 股價序列
- 第 6 節「建議買入價格與交易時機」觸發買入策略區塊，第 7 節開頭結束
"""

ANALYSIS_PROMPT = """
請針對台灣股票代碼 {stock_code} 進行深度專業分析。
請務必全程使用「繁體中文 (zh-TW)」。

報告第一行請標示「市場別：上市」或「市場別：上櫃」。

分析報告必須嚴格包含以下八個部分，每個部分以 Markdown「##」標題開頭並加上編號：
1. **公司基本資料**：完整名稱、所屬產業及核心業務。
2. **營運概況與未來前景**：分析公司目前的獲利能力及未來的發展潛力（是否能繼續賺錢）。
3. **法人買賣超動向 (近一週)**：分析「過去一週」法人（外資、投信、自營商）的具體買賣超走向、籌碼集中度觀察，說明市場主力動態。
4. **技術走勢分析 (2年日線/月線描述)**：文字描述過去「兩年」來的日線與月線技術走勢。說明目前的均線型態、支撐壓力區間。
   請在本節附上近 12 個月的月收盤價，格式必須完全如下（單行 JSON，不要加程式碼區塊）：
   [DATA_START]{{"labels": ["2024-01", "2024-02"], "prices": [580.0, 612.5]}}[DATA_END]
5. **3-6 個月股價趨勢預測**：明確給出方向（看漲、看跌或持平），並提供詳細理由與依據。
6. **建議買入價格與交易時機**：給出建議買入價格區間、分批進場時機與停損參考。
7. **近一個月重要新聞與公告**：彙整最近 30 天內的重要新聞、財報表現或重大訊息。
8. **過去 5 年股利與獲利數據表格**：請使用 Markdown 表格呈現（含年度、當時股價、股利、EPS、盈餘分配率）。

請利用 Google Search 工具獲取最新的籌碼數據與市場動態。
報告風格應維持客觀、專業、深入。
"""

EMPTY_REPORT_TEXT = "無法生成分析報告。"


def build_analysis_prompt(stock_code: str) -> str:
    return ANALYSIS_PROMPT.format(stock_code=stock_code.strip())
