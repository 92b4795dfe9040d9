"""Statement Analyzer — browser UI + JSON API.

Single-page app with:
  - Company name + statement text form (paste, or upload a .csv/.txt file)
  - Claude-powered analysis: figures, ratios, CFA summary, recommendation
  - Server-side bar chart layout rendered as SVG, dark/light themes
  - PDF download of the full report

Run:  python -m statement_analyzer.app
Open: http://localhost:{PORT}  (default 8877)
"""

from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from statement_analyzer.analyzer import AnalysisError, MissingInputError, StatementAnalyzer
from statement_analyzer.chart import layout_chart, render_svg
from statement_analyzer.config import ConfigError, Settings, get_config
from statement_analyzer.export import ExportError, render_report_pdf, report_filename
from statement_analyzer.models import (
    AnalyzeRequest,
    ChartRequest,
    EmptyChart,
    ExtractedData,
    FinancialAnalysis,
    ReportRequest,
    Theme,
)
from statement_analyzer.themes import recommendation_colors

log = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"type": "error", "message": message})


def chart_payload(data: list[ExtractedData], theme: Theme) -> dict:
    """Chart layout + SVG for the frontend, or the empty placeholder."""
    layout = layout_chart(data, theme)
    if isinstance(layout, EmptyChart):
        return {"empty": True, "theme": layout.theme.value, "message": layout.message}
    return {
        "empty": False,
        "theme": layout.theme.value,
        "layout": layout.model_dump(mode="json"),
        "svg": render_svg(layout),
    }


def _analysis_payload(analysis: FinancialAnalysis) -> dict:
    data = analysis.model_dump(mode="json", by_alias=True)
    bg, fg = recommendation_colors(analysis.recommendation)
    data["recommendationColors"] = {"background": bg, "text": fg}
    return data


def create_app(analyzer: StatementAnalyzer) -> FastAPI:
    """Build the FastAPI app around an already-configured analyzer."""
    app = FastAPI(title="Statement Analyzer")
    app.state.analyzer = analyzer

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ═══════════════════════════════════════════════════════════════════
    #  Health check
    # ═══════════════════════════════════════════════════════════════════

    @app.get("/health")
    async def health(request: Request):
        return {"status": "ok", "model": request.app.state.analyzer.model}

    # ═══════════════════════════════════════════════════════════════════
    #  API endpoints
    # ═══════════════════════════════════════════════════════════════════

    @app.post("/api/analyze")
    def analyze(req: AnalyzeRequest, request: Request):
        """Run the analysis and return it with the chart for the chosen theme.

        Plain ``def``: the Anthropic client is synchronous, so FastAPI runs
        this in its threadpool.
        """
        t0 = time.time()
        try:
            result = request.app.state.analyzer.analyze(req.statement_text, req.company_name)
        except MissingInputError as exc:
            log.info("Rejected analysis request: %s", exc)
            return _error(400, str(exc))
        except AnalysisError as exc:
            return _error(502, f"Analysis failed: {exc}")

        return {
            "type": "result",
            "analysis": _analysis_payload(result),
            "chart": chart_payload(result.extracted_data, req.theme),
            "elapsed_ms": int((time.time() - t0) * 1000),
        }

    @app.post("/api/chart")
    async def chart(req: ChartRequest) -> dict:
        """Re-layout the chart, e.g. after a theme switch."""
        return chart_payload(req.data, req.theme)

    @app.post("/api/report/pdf")
    def report_pdf(req: ReportRequest):
        try:
            pdf = render_report_pdf(
                req.analysis, scale=req.scale, background=req.background, theme=req.theme,
            )
        except ExportError as exc:
            log.warning("PDF export failed: %s", exc)
            return _error(500, f"Export failed: {exc}")

        filename = report_filename(req.analysis.company_name)
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/")
    async def index():
        """Serve the single-page UI."""
        return HTMLResponse(HTML)

    return app


def build_app(config: Settings | None = None) -> FastAPI:
    """Build the app from settings; raises ConfigError without an API key.

    Usable as a uvicorn factory:
        uvicorn --factory statement_analyzer.app:build_app
    """
    config = config or get_config()
    analyzer = StatementAnalyzer.from_config(config)
    return create_app(analyzer)


# ═══════════════════════════════════════════════════════════════════════════
#  HTML — single page, vanilla JS
# ═══════════════════════════════════════════════════════════════════════════

HTML = r"""<!DOCTYPE html>
<html lang="en"><head>
<meta charset="utf-8"/><meta name="viewport" content="width=device-width,initial-scale=1"/>
<title>AI Financial Statement Analyzer</title>
<link rel="preconnect" href="https://fonts.googleapis.com"/>
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin/>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&family=JetBrains+Mono:wght@400;600;700&display=swap" rel="stylesheet"/>
<style>
*{box-sizing:border-box;margin:0;padding:0}
:root{
  --bg0:#0c0f14;--bg1:#13161d;--card:#1a1e27;--bdr:#2e343e;
  --t1:#f0f2f5;--t2:#cbd5e0;--t3:#a0a8b8;--t4:#6b7585;
  --brand:#007A7A;--brand2:#005f5f;--accent:#FFC107;
  --green:#34d399;--red:#ff5266;--amber:#ffb347;
  --ff:'Inter',system-ui,-apple-system,sans-serif;--fm:'JetBrains Mono',monospace;--r:12px;
  --shadow:0 2px 12px rgba(0,0,0,.25);
}
body.light{
  --bg0:#f7f8fa;--bg1:#ffffff;--card:#ffffff;--bdr:#e4e7ec;
  --t1:#1a1d23;--t2:#374151;--t3:#4a5060;--t4:#7a8294;
  --brand:#047857;--brand2:#065f46;--accent:#D97706;
  --green:#16a34a;--red:#dc2626;--amber:#b45309;
  --shadow:0 2px 12px rgba(0,0,0,.06);
}
html,body{min-height:100%;background:var(--bg0);color:var(--t1);font:15px/1.55 var(--ff);-webkit-font-smoothing:antialiased}
.wrap{max-width:1040px;margin:0 auto;padding:32px 20px}
header{text-align:center;margin-bottom:28px;position:relative}
header h1{font:800 32px var(--ff);letter-spacing:-.5px;margin-bottom:6px}
header p{color:var(--t3);font-size:17px}
.theme-btn{position:absolute;right:0;top:0;width:34px;height:34px;border-radius:50%;border:1px solid var(--bdr);
  background:var(--card);color:var(--t3);font-size:15px;cursor:pointer}
.card{background:var(--card);border:1px solid var(--bdr);border-radius:var(--r);padding:22px;box-shadow:var(--shadow)}
label{display:block;font:600 17px var(--ff);color:var(--t2);margin-bottom:8px}
input[type=text],textarea{width:100%;background:var(--bg0);border:1px solid var(--bdr);border-radius:8px;
  padding:12px;color:var(--t1);font:14px var(--ff);outline:none}
input[type=text]:focus,textarea:focus{border-color:var(--brand);box-shadow:0 0 0 2px rgba(0,122,122,.3)}
textarea{height:190px;resize:vertical;margin-top:0}
.field{margin-bottom:16px}
.row{display:flex;flex-wrap:wrap;align-items:center;justify-content:space-between;gap:14px;margin-top:14px}
.btn{border:none;border-radius:8px;padding:10px 18px;font:600 14px var(--ff);cursor:pointer;color:#fff;background:var(--brand);transition:.2s}
.btn:hover{background:var(--brand2)}
.btn:disabled{opacity:.5;cursor:not-allowed}
.btn.sub{background:var(--bdr);color:var(--t1)}
.hint{font-size:13px;color:var(--t4);margin-left:8px}
#out{margin-top:30px;min-height:300px}
.welcome{text-align:center;color:var(--t3)}
.welcome h2{font:600 24px var(--ff);color:var(--t1);margin-bottom:12px}
.err{background:rgba(229,62,62,.15);border:1px solid var(--red);color:var(--red);border-radius:10px;padding:12px 16px;text-align:center}
.loader{display:flex;flex-direction:column;align-items:center;gap:16px;padding:60px 0;color:var(--t3)}
.sp{width:42px;height:42px;border:3px solid var(--bdr);border-top-color:var(--brand);border-radius:50%;animation:spin .8s linear infinite}
@keyframes spin{to{transform:rotate(360deg)}}
.report>*+*{margin-top:24px}
.rep-hdr{display:flex;flex-wrap:wrap;justify-content:space-between;align-items:center;gap:16px}
.rep-hdr h2{font:700 24px var(--ff)}
.rep-hdr h2 span{color:var(--accent)}
.rep-hdr .st{color:var(--brand);font-weight:600;font-size:17px}
.reco{text-align:center}
.reco small{display:block;color:var(--t3);font-weight:600;margin-bottom:4px}
.badge{display:inline-block;padding:8px 24px;border-radius:999px;font:700 20px var(--ff)}
h3{font:600 20px var(--ff);color:var(--t2);margin-bottom:14px}
h4{font:600 15px var(--ff)}
.sum p{color:var(--t2);margin-bottom:12px}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(280px,1fr));gap:14px}
.ratio{background:var(--card);border:1px solid var(--bdr);border-radius:10px;padding:18px;transition:.2s}
.ratio:hover{border-color:var(--brand);transform:translateY(-2px)}
.ratio .top{display:flex;justify-content:space-between;align-items:flex-start;gap:10px}
.ratio .v{font:700 22px var(--ff);color:var(--accent)}
.ratio .i{margin-top:8px;font-size:13px;color:var(--t3)}
.cols{display:grid;grid-template-columns:2fr 3fr;gap:24px}
@media(max-width:800px){.cols{grid-template-columns:1fr}}
.tbl{max-height:380px;overflow:auto}
table{width:100%;border-collapse:collapse}
th{position:sticky;top:0;background:var(--card);text-align:left;padding:8px;color:var(--brand);border-bottom:2px solid var(--bdr)}
th.r,td.r{text-align:right}
td{padding:8px;border-bottom:1px solid var(--bdr);color:var(--t2)}
td.r{font-family:var(--fm);color:var(--t1)}
.chart{display:flex;align-items:center;justify-content:center;min-height:120px}
.chart p{color:var(--t4)}
.disc{text-align:center;opacity:.85}
.disc p{font-size:13px;color:var(--t4)}
footer{text-align:center;color:var(--t4);font-size:13px;margin-top:48px}
</style></head>
<body>
<div class="wrap">
<header>
  <button class="theme-btn" id="theme-btn" onclick="toggleTheme()" title="Toggle theme">&#9790;</button>
  <h1>AI Financial Statement Analyzer</h1>
  <p>Professional-grade analysis of UAE-listed companies with Claude</p>
</header>

<div class="card">
<form id="frm" onsubmit="return submitForm(event)">
  <div class="field">
    <label for="company-name">Company Name</label>
    <input id="company-name" type="text" placeholder="e.g., Emaar Properties PJSC" oninput="syncBtn()" required/>
  </div>
  <div>
    <label for="statement-text">Paste Financial Statement Text</label>
    <textarea id="statement-text" placeholder="Paste the text from your financial statement here... (PDF or CSV content)" oninput="syncBtn()" required></textarea>
  </div>
  <div class="row">
    <div>
      <button type="button" class="btn sub" id="up-btn" onclick="document.getElementById('file').click()">&#8679; Upload File</button>
      <input type="file" id="file" accept=".csv,.txt" style="display:none" onchange="loadFile(this)"/>
      <span class="hint">.csv or .txt</span>
    </div>
    <button type="submit" class="btn" id="go" disabled>Start Financial Analysis</button>
  </div>
</form>
</div>

<div id="out">
  <div class="card welcome">
    <h2>Welcome!</h2>
    <p>Enter a company name and paste a financial statement in the box above, or upload a file.</p>
    <p>Click "Start Financial Analysis" to get your report.</p>
  </div>
</div>

<footer><p>Powered by Anthropic Claude. This is not financial advice.</p></footer>
</div>

<script>
let _analysis=null, _busy=false;
const $=id=>document.getElementById(id);
function esc(s){return String(s==null?'':s).replace(/[&<>"']/g,c=>({'&':'&amp;','<':'&lt;','>':'&gt;','"':'&quot;',"'":'&#39;'}[c]))}
function theme(){return document.body.classList.contains('light')?'light':'dark'}

function syncBtn(){$('go').disabled=_busy||!$('company-name').value||!$('statement-text').value}
function setBusy(b){_busy=b;$('company-name').disabled=b;$('statement-text').disabled=b;$('up-btn').disabled=b;
  $('go').textContent=b?'Analyzing...':'Start Financial Analysis';syncBtn()}

function loadFile(inp){
  const f=inp.files&&inp.files[0];if(!f)return;
  const rd=new FileReader();
  rd.onload=e=>{$('statement-text').value=e.target.result;syncBtn()};
  rd.readAsText(f);
}

async function submitForm(ev){
  ev.preventDefault();
  const name=$('company-name').value, text=$('statement-text').value;
  if(!name.trim()||!text.trim()){
    showError('Please provide both a company name and the financial statement text.');return false}
  setBusy(true);_analysis=null;
  $('out').innerHTML='<div class="loader"><div class="sp"></div><div>Analyzing statement...</div></div>';
  try{
    const r=await fetch('/api/analyze',{method:'POST',headers:{'Content-Type':'application/json'},
      body:JSON.stringify({companyName:name,statementText:text,theme:theme()})});
    const d=await r.json();
    if(!r.ok||d.type==='error'){showError(d.message||('HTTP '+r.status))}
    else{_analysis=d.analysis;renderReport(d.analysis,d.chart)}
  }catch(e){showError('Analysis failed: '+e.message)}
  finally{setBusy(false)}
  return false;
}

function showError(msg){
  $('out').innerHTML='<div class="err" role="alert"><strong>Error: </strong><span>'+esc(msg)+'</span></div>';
}

function chartHtml(c){return c.empty?'<p>'+esc(c.message)+'</p>':c.svg}

function renderReport(a,chart){
  const rc=a.recommendationColors||{background:'#6b7280',text:'#fff'};
  const ratios=(a.ratios||[]).map(r=>'<div class="ratio"><div class="top"><h4>'+esc(r.name)+'</h4><div class="v">'+esc(r.value)+
    '</div></div><div class="i">'+esc(r.interpretation)+'</div></div>').join('');
  const rows=(a.extractedData||[]).map(d=>'<tr><td>'+esc(d.metric)+'</td><td class="r">'+esc(d.value)+'</td></tr>').join('');
  $('out').innerHTML=
   '<div class="report">'+
    '<div class="card rep-hdr"><div><h2>Financial Report for <span>'+esc(a.companyName)+'</span></h2>'+
      '<div class="st">'+esc(a.statementType)+'</div></div>'+
      '<div style="display:flex;gap:16px;align-items:center"><div class="reco"><small>Recommendation</small>'+
      '<span class="badge" style="background:'+esc(rc.background)+';color:'+esc(rc.text)+'">'+esc(a.recommendation)+'</span></div>'+
      '<button class="btn" id="pdf-btn" onclick="downloadPdf()">&#8681; Download PDF</button></div></div>'+
    '<div class="card sum"><h3>CFA Summary</h3>'+
      '<h4 style="color:var(--green)">Strengths</h4><p>'+esc(a.summary.strengths)+'</p>'+
      '<h4 style="color:var(--red)">Weaknesses</h4><p>'+esc(a.summary.weaknesses)+'</p>'+
      '<h4 style="color:var(--amber)">Outlook</h4><p>'+esc(a.summary.outlook)+'</p></div>'+
    '<div><h3>Key Financial Ratios</h3><div class="grid">'+ratios+'</div></div>'+
    '<div class="cols"><div class="card"><h3>Extracted Data</h3><div class="tbl"><table><thead><tr><th>Metric</th><th class="r">Value</th></tr></thead><tbody>'+
      rows+'</tbody></table></div></div>'+
      '<div class="card"><h3>Visual Insights</h3><div class="chart" id="chart">'+chartHtml(chart)+'</div></div></div>'+
    '<div class="card disc"><h4>Disclaimer</h4><p>'+esc(a.cfaDisclaimer)+'</p></div>'+
   '</div>';
}

async function refreshChart(){
  if(!_analysis||!$('chart'))return;
  try{
    const r=await fetch('/api/chart',{method:'POST',headers:{'Content-Type':'application/json'},
      body:JSON.stringify({data:_analysis.extractedData,theme:theme()})});
    if(r.ok)$('chart').innerHTML=chartHtml(await r.json());
  }catch(e){console.error('Chart refresh failed',e)}
}

async function downloadPdf(){
  if(!_analysis)return;
  const btn=$('pdf-btn');btn.disabled=true;btn.textContent='Generating PDF...';
  try{
    const r=await fetch('/api/report/pdf',{method:'POST',headers:{'Content-Type':'application/json'},
      body:JSON.stringify({analysis:_analysis,scale:2,background:'#ffffff'})});
    if(!r.ok){const d=await r.json().catch(()=>({}));throw new Error(d.message||('HTTP '+r.status))}
    const cd=r.headers.get('Content-Disposition')||'';
    const m=cd.match(/filename="([^"]+)"/);
    const url=URL.createObjectURL(await r.blob());
    const a=document.createElement('a');a.href=url;a.download=m?m[1]:'financial_report.pdf';
    document.body.appendChild(a);a.click();a.remove();URL.revokeObjectURL(url);
  }catch(e){console.error('Failed to generate PDF',e);alert('Export failed: '+e.message)}
  finally{btn.disabled=false;btn.innerHTML='&#8681; Download PDF'}
}

function toggleTheme(){
  const isLight=document.body.classList.toggle('light');
  localStorage.setItem('sa-theme',isLight?'light':'dark');
  const btn=$('theme-btn');if(btn)btn.innerHTML=isLight?'☀':'☾';
  refreshChart();
}
(function initTheme(){
  const saved=localStorage.getItem('sa-theme');
  if(saved==='light'){document.body.classList.add('light');
    const btn=$('theme-btn');if(btn)btn.innerHTML='☀';}
})();
</script>
</body></html>
"""


def main():
    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        app = build_app(config)
    except ConfigError as exc:
        log.error("%s", exc)
        raise SystemExit(2) from exc

    import uvicorn

    print(f"\n  Statement Analyzer → http://localhost:{config.port}\n")
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
