import html as html_lib

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from ..auth import get_settings
from ..config import Settings

router = APIRouter()

DASHBOARD_HTML = """<!DOCTYPE html>
<html lang='en'>
<head>
<meta charset='utf-8'/>
<meta name='viewport' content='width=device-width, initial-scale=1'/>
<title>__TITLE__</title>
<style>
  body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; margin:0; background:#f8fafc; color:#333; }
  header { background:linear-gradient(135deg,#667eea 0%,#764ba2 100%); color:#fff; padding:24px 32px; }
  header h1 { margin:0; font-size:1.6rem; }
  header p { margin:4px 0 0 0; opacity:.85; }
  .container { max-width:960px; margin:0 auto; padding:24px; }
  .card { background:#fff; border-radius:10px; box-shadow:0 1px 3px rgba(0,0,0,.08); padding:20px; margin-bottom:20px; }
  .row { display:flex; gap:8px; flex-wrap:wrap; align-items:center; }
  .input { flex:1; min-width:180px; padding:8px 10px; border:1px solid #ddd; border-radius:6px; }
  .btn { background:#667eea; color:#fff; border:0; border-radius:6px; padding:8px 14px; cursor:pointer; }
  .btn-secondary { background:#fff; color:#667eea; border:1px solid #667eea; border-radius:6px; padding:6px 12px; cursor:pointer; }
  .muted { color:#666; font-size:.9rem; }
  .error { color:#ef4444; min-height:1.2em; }
  .site { display:flex; justify-content:space-between; align-items:center; padding:14px 0; border-bottom:1px solid #eee; }
  .site:last-child { border-bottom:0; }
  .site .url { color:#666; font-size:.85rem; word-break:break-all; }
  .stats { display:flex; gap:18px; align-items:center; }
  .stat b { display:block; font-size:1.05rem; }
  .pill { padding:3px 10px; border-radius:999px; font-size:.8rem; font-weight:600; color:#fff; }
  .pill.up { background:#10b981; } .pill.down { background:#ef4444; } .pill.unknown { background:#f59e0b; }
  .hidden { display:none; }
</style>
</head>
<body>
<header>
  <h1>__TITLE__</h1>
  <p>Refreshes every __REFRESH__s · <span id='lastTs'></span></p>
</header>
<div class='container'>

<section class='card' id='loginCard'>
  <h2 style='margin-top:0;'>Admin login</h2>
  <form id='loginForm' class='row'>
    <input id='password' type='password' class='input' placeholder='Admin password' autocomplete='current-password' required/>
    <button class='btn' type='submit'>Login</button>
  </form>
  <div id='loginMsg' class='error' role='alert'></div>
</section>

<section class='card hidden' id='addCard'>
  <div class='row' style='justify-content:space-between;'>
    <h2 style='margin:0;'>Add website</h2>
    <button id='logoutBtn' class='btn-secondary' type='button'>Logout</button>
  </div>
  <form id='addWebsiteForm' class='row' style='margin-top:12px;'>
    <input id='websiteName' class='input' placeholder='Name' required/>
    <input id='websiteUrl' type='url' class='input' placeholder='https://example.com' required/>
    <button class='btn' type='submit'>Add</button>
  </form>
  <div id='addMsg' class='error' role='alert'></div>
</section>

<section class='card'>
  <h2 style='margin-top:0;'>Websites</h2>
  <div id='websites'><div class='muted'>Loading...</div></div>
</section>

</div>

<script>
const REFRESH_MS = __REFRESH__ * 1000;

function formatTime(ts){
  const diff = Date.now() - new Date(ts).getTime();
  if(diff < 60000) return 'Just now';
  if(diff < 3600000) return Math.floor(diff/60000)+'m ago';
  if(diff < 86400000) return Math.floor(diff/3600000)+'h ago';
  return Math.floor(diff/86400000)+'d ago';
}

function stat(label, value){
  const d=document.createElement('div'); d.className='stat';
  const b=document.createElement('b'); b.textContent=value; d.appendChild(b);
  const s=document.createElement('span'); s.className='muted'; s.textContent=label; d.appendChild(s);
  return d;
}

function renderWebsites(rows){
  const box = document.getElementById('websites');
  box.innerHTML='';
  if(!rows.length){ box.innerHTML="<div class='muted'>No websites yet.</div>"; return; }
  for(const w of rows){
    const cur = w.currentStatus;
    const row=document.createElement('div'); row.className='site';

    const info=document.createElement('div');
    const name=document.createElement('div'); name.textContent=w.name; name.style.fontWeight='600'; info.appendChild(name);
    const url=document.createElement('div'); url.className='url'; url.textContent=w.url; info.appendChild(url);
    if(cur && cur.error){ const e=document.createElement('div'); e.className='error'; e.textContent=cur.error; info.appendChild(e); }
    row.appendChild(info);

    const stats=document.createElement('div'); stats.className='stats';
    const pill=document.createElement('span');
    const st = cur ? cur.status : 'unknown';
    pill.className='pill '+st; pill.textContent=st.toUpperCase()+(cur && cur.statusCode ? ' ('+cur.statusCode+')' : '');
    stats.appendChild(pill);
    stats.appendChild(stat('uptime 24h', w.uptimePercent+'%'));
    stats.appendChild(stat('avg response', w.averageResponseTimeMs+' ms'));
    stats.appendChild(stat('last check', cur ? formatTime(cur.timestamp) : '-'));
    const btn=document.createElement('button'); btn.className='btn-secondary'; btn.textContent='Check now';
    btn.addEventListener('click', ()=>checkWebsite(w.id, btn));
    stats.appendChild(btn);
    row.appendChild(stats);

    box.appendChild(row);
  }
}

async function loadWebsites(){
  try{
    const r = await fetch('/api/status');
    if(!r.ok) throw new Error('status '+r.status);
    renderWebsites(await r.json());
    document.getElementById('lastTs').textContent='Updated: '+new Date().toLocaleTimeString();
  }catch(e){ console.error(e); }
}

async function checkWebsite(id, btn){
  btn.disabled=true; btn.textContent='Checking…';
  try{
    await fetch('/api/check', {method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify({websiteId:id})});
  }catch(e){ console.error(e); }
  await loadWebsites();
}

function setAuthenticated(on){
  document.getElementById('loginCard').classList.toggle('hidden', on);
  document.getElementById('addCard').classList.toggle('hidden', !on);
}

async function checkAuthStatus(){
  try{
    const r = await fetch('/api/auth-status', {credentials:'same-origin'});
    const d = await r.json();
    setAuthenticated(!!d.authenticated);
  }catch(e){ setAuthenticated(false); }
}

document.getElementById('loginForm').addEventListener('submit', async (e)=>{
  e.preventDefault();
  const msg=document.getElementById('loginMsg'); msg.textContent='';
  const r = await fetch('/api/login', {method:'POST', headers:{'Content-Type':'application/json'},
    body: JSON.stringify({password: document.getElementById('password').value}), credentials:'same-origin'});
  if(r.ok){ document.getElementById('password').value=''; setAuthenticated(true); }
  else{ const t = await r.json().catch(()=>({})); msg.textContent = t.message || 'Login failed'; }
});

document.getElementById('logoutBtn').addEventListener('click', async ()=>{
  await fetch('/api/logout', {method:'POST', credentials:'same-origin'});
  setAuthenticated(false);
});

document.getElementById('addWebsiteForm').addEventListener('submit', async (e)=>{
  e.preventDefault();
  const msg=document.getElementById('addMsg'); msg.textContent='';
  const name=document.getElementById('websiteName').value.trim();
  const url=document.getElementById('websiteUrl').value.trim();
  const r = await fetch('/api/websites', {method:'POST', headers:{'Content-Type':'application/json'},
    body: JSON.stringify({name, url}), credentials:'same-origin'});
  if(r.ok){ e.target.reset(); loadWebsites(); }
  else if(r.status===401){ setAuthenticated(false); msg.textContent='Session expired, log in again.'; }
  else{ const t = await r.json().catch(()=>({})); msg.textContent = t.detail || 'Error adding website'; }
});

checkAuthStatus(); loadWebsites(); setInterval(loadWebsites, REFRESH_MS);
</script>
</body>
</html>"""

@router.get("/", response_class=HTMLResponse)
def root(settings: Settings = Depends(get_settings)):
    html = DASHBOARD_HTML.replace("__TITLE__", html_lib.escape(settings.APP_TITLE))
    html = html.replace("__REFRESH__", str(int(settings.DASHBOARD_REFRESH_S)))
    return HTMLResponse(html)
