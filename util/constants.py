class InternalURIs:
    API = "/api"
    V1 = API + "/v1"
    CHECK = V1 + "/plagiarism/check"
    CHECK_FILE = V1 + "/plagiarism/check-file"
    COMPARE_DOCUMENTS = V1 + "/plagiarism/compare-documents"
    ANALYZE_STYLE = V1 + "/style/analyze"


class HeatmapColors:
    RED = "#ef4444"
    ORANGE = "#f59e0b"
    YELLOW = "#eab308"
    LIGHT_GREEN = "#a3e635"
    GREEN = "#22c55e"
    GREY = "#6b7280"
