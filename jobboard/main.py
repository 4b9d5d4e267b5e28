"""
FastAPI application exposing the job board API and its single-page UI.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from neo4j import AsyncSession

from .accounts import AccountStore
from .config import get_settings
from .db import close_driver, ensure_constraints, neo4j_session, verify_connectivity
from .logging_config import configure_logging
from .models import Credentials, ErrorResponse, Job, JobCreate, JobUpdate, Message, SessionInfo
from .store import JobStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """
    Refuse to start without a reachable store.

    Any failure here propagates, which makes uvicorn exit.
    """
    configure_logging(get_settings().log_level)
    try:
        await verify_connectivity()
        await ensure_constraints()
    except Exception:
        logger.error("Job store unavailable, shutting down", exc_info=True)
        await close_driver()
        raise
    yield
    await close_driver()


app = FastAPI(
    title="Job Board API",
    description="Neo4j-backed job postings with a small browser front end.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_methods=["*"],
    allow_headers=["*"],
)

bearer = HTTPBearer(auto_error=False)


async def get_session() -> AsyncSession:
    """Dependency to inject a Neo4j session."""
    async with neo4j_session() as session:
        yield session


async def get_job_store(session: AsyncSession = Depends(get_session)) -> JobStore:
    return JobStore(session)


async def get_account_store(session: AsyncSession = Depends(get_session)) -> AccountStore:
    return AccountStore(session)


def error_response(status_code: int, message: str, fields: Optional[List[str]] = None) -> JSONResponse:
    payload = ErrorResponse(error=message, fields=fields)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report missing or invalid body fields as a 400 listing them."""
    fields: List[str] = []
    for err in exc.errors():
        loc = err.get("loc", ())
        # JSON decode errors carry a character offset, not a field name
        if len(loc) > 1 and loc[0] == "body" and isinstance(loc[1], str) and loc[1] not in fields:
            fields.append(loc[1])
    return error_response(status.HTTP_400_BAD_REQUEST, "Missing or invalid fields", fields or None)


@app.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Welcome to the Job Board API!"


@app.get("/health")
async def health() -> dict:
    """Simple health-check endpoint used by external probes."""
    return {"status": "ok"}


@app.get("/jobs", response_model=List[Job], responses={500: {"model": ErrorResponse}})
async def list_jobs(store: JobStore = Depends(get_job_store)):
    """Every job posting, in insertion order. Filtering is left to clients."""
    try:
        return await store.list_all()
    except Exception:
        logger.error("Failed to fetch jobs", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch jobs")


@app.post(
    "/jobs",
    response_model=Job,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_job(payload: JobCreate, store: JobStore = Depends(get_job_store)):
    try:
        return await store.insert(payload)
    except Exception:
        logger.error("Failed to add job", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to add job")


@app.put(
    "/jobs/{job_id}",
    response_model=Job,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def update_job(job_id: str, payload: JobUpdate, store: JobStore = Depends(get_job_store)):
    try:
        job = await store.update(job_id, payload)
    except Exception:
        logger.error("Failed to update job %s", job_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update job")
    if job is None:
        return error_response(status.HTTP_404_NOT_FOUND, "Job not found")
    return job


@app.delete(
    "/jobs/{job_id}",
    response_model=Message,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def delete_job(job_id: str, store: JobStore = Depends(get_job_store)):
    try:
        deleted = await store.delete(job_id)
    except Exception:
        logger.error("Failed to delete job %s", job_id, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete job")
    if not deleted:
        return error_response(status.HTTP_404_NOT_FOUND, "Job not found")
    return Message(message="Job deleted successfully")


@app.post("/auth/signup", response_model=Message, status_code=status.HTTP_201_CREATED)
async def signup(credentials: Credentials, accounts: AccountStore = Depends(get_account_store)):
    try:
        await accounts.signup(credentials.username, credentials.password)
    except Exception:
        logger.error("Failed to sign up %s", credentials.username, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to sign up")
    return Message(message="Signup successful! Please log in.")


@app.post("/auth/login", response_model=SessionInfo, responses={401: {"model": ErrorResponse}})
async def login(credentials: Credentials, accounts: AccountStore = Depends(get_account_store)):
    try:
        session = await accounts.login(credentials.username, credentials.password)
    except Exception:
        logger.error("Failed to log in %s", credentials.username, exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to log in")
    if session is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, "Invalid credentials")
    return session


@app.post("/auth/logout", response_model=Message)
async def logout(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    accounts: AccountStore = Depends(get_account_store),
):
    if credentials is not None:
        try:
            await accounts.logout(credentials.credentials)
        except Exception:
            logger.error("Failed to log out", exc_info=True)
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to log out")
    return Message(message="Logged out successfully.")


@app.get("/auth/session", response_model=SessionInfo, responses={401: {"model": ErrorResponse}})
async def current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    accounts: AccountStore = Depends(get_account_store),
):
    """Resolve a bearer token to its user."""
    if credentials is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, "Not logged in")
    try:
        username = await accounts.current(credentials.credentials)
    except Exception:
        logger.error("Failed to look up session", exc_info=True)
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to look up session")
    if username is None:
        return error_response(status.HTTP_401_UNAUTHORIZED, "Not logged in")
    return SessionInfo(username=username, token=credentials.credentials)


@app.get("/board", response_class=HTMLResponse)
async def board() -> str:
    """
    Job board page: search, filter, sort, post, apply and delete.

    Listing rules match jobboard.listing. The session returned by login is
    kept in page memory only and handed to the render functions.
    """
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
      <meta charset="UTF-8" />
      <title>Job Board</title>
      <style>
        body { font-family: system-ui, -apple-system, BlinkMacSystemFont, sans-serif; margin: 0; padding: 0; background: #0f172a; color: #e5e7eb; }
        header { padding: 16px 24px; background: #020617; border-bottom: 1px solid #1f2937; display: flex; justify-content: space-between; align-items: center; }
        h1 { margin: 0; font-size: 20px; }
        main { max-width: 1100px; margin: 24px auto; padding: 0 16px 32px; }
        section { background: #020617; border-radius: 12px; padding: 16px 20px; margin-bottom: 20px; border: 1px solid #1f2937; }
        section h2 { margin-top: 0; font-size: 18px; }
        label { display: block; margin-bottom: 4px; font-size: 13px; color: #9ca3af; }
        input, select {
          width: 100%; padding: 8px 10px; border-radius: 8px; border: 1px solid #374151;
          background: #020617; color: #e5e7eb; box-sizing: border-box; margin-bottom: 8px;
        }
        input:focus, select:focus { outline: none; border-color: #3b82f6; box-shadow: 0 0 0 1px #3b82f6; }
        button {
          background: #3b82f6; color: white; border: none; border-radius: 20px; padding: 8px 16px;
          font-size: 14px; cursor: pointer; margin-top: 4px; margin-right: 6px;
        }
        button:hover { background: #2563eb; }
        button.danger { background: #b91c1c; }
        .row { display: flex; flex-wrap: wrap; gap: 16px; }
        .col { flex: 1 1 200px; }
        .job { padding: 12px 0; border-bottom: 1px solid #111827; }
        .job h3 { margin: 0 0 4px; font-size: 16px; }
        .small { font-size: 12px; color: #6b7280; }
        .hidden { display: none; }
      </style>
    </head>
    <body>
      <header>
        <h1>Job Board</h1>
        <div>
          <span id="user-status" class="small">Not logged in</span>
          <button id="logout-btn" class="hidden" onclick="logout()">Log out</button>
        </div>
      </header>
      <main>
        <section>
          <h2>Account</h2>
          <div class="row">
            <div class="col">
              <label for="username">Username</label>
              <input id="username" type="text" />
            </div>
            <div class="col">
              <label for="password">Password</label>
              <input id="password" type="password" />
            </div>
          </div>
          <button onclick="signup()">Sign up</button>
          <button onclick="login()">Log in</button>
        </section>

        <section id="post-section" class="hidden">
          <h2>Post a job</h2>
          <div class="row">
            <div class="col"><label for="new-title">Title</label><input id="new-title" type="text" /></div>
            <div class="col"><label for="new-company">Company</label><input id="new-company" type="text" /></div>
            <div class="col"><label for="new-location">Location</label><input id="new-location" type="text" /></div>
          </div>
          <div class="row">
            <div class="col"><label for="new-type">Job type</label><input id="new-type" type="text" placeholder="e.g. Full-time" /></div>
            <div class="col"><label for="new-salary">Salary</label><input id="new-salary" type="number" min="0" /></div>
            <div class="col"><label for="new-experience">Experience (years)</label><input id="new-experience" type="number" min="0" /></div>
          </div>
          <button onclick="postJob()">Post job</button>
        </section>

        <section>
          <h2>Jobs</h2>
          <div class="row">
            <div class="col">
              <label for="search">Search title or company</label>
              <input id="search" type="text" oninput="refresh()" />
            </div>
            <div class="col">
              <label for="location-filter">Location</label>
              <select id="location-filter" onchange="refresh()"></select>
            </div>
            <div class="col">
              <label for="job-type-filter">Job type</label>
              <select id="job-type-filter" onchange="refresh()"></select>
            </div>
            <div class="col">
              <label for="sort-filter">Sort by</label>
              <select id="sort-filter" onchange="refresh()">
                <option value="">Default</option>
                <option value="salary-high">Salary: high to low</option>
                <option value="salary-low">Salary: low to high</option>
                <option value="experience-high">Experience: high to low</option>
                <option value="experience-low">Experience: low to high</option>
                <option value="company">Company name</option>
              </select>
            </div>
          </div>
          <div id="jobs-container"></div>
        </section>
      </main>

      <script>
        const board = { session: null };

        const jobsContainer = document.getElementById("jobs-container");
        const locationFilter = document.getElementById("location-filter");
        const jobTypeFilter = document.getElementById("job-type-filter");
        const sortFilter = document.getElementById("sort-filter");
        const userStatus = document.getElementById("user-status");
        const logoutBtn = document.getElementById("logout-btn");
        const postSection = document.getElementById("post-section");

        // Data layer: failures are logged and become an empty/neutral result.
        async function fetchJobs() {
          try {
            const resp = await fetch("/jobs");
            if (!resp.ok) throw new Error(`HTTP ${resp.status}`);
            return await resp.json();
          } catch (e) {
            console.error("Error fetching jobs:", e);
            return [];
          }
        }

        async function createJob(payload) {
          try {
            const resp = await fetch("/jobs", {
              method: "POST",
              headers: { "Content-Type": "application/json" },
              body: JSON.stringify(payload),
            });
            if (!resp.ok) throw new Error(`HTTP ${resp.status}`);
            return await resp.json();
          } catch (e) {
            console.error("Error posting job:", e);
            return null;
          }
        }

        async function removeJob(id) {
          try {
            const resp = await fetch(`/jobs/${encodeURIComponent(id)}`, { method: "DELETE" });
            if (!resp.ok) throw new Error(`HTTP ${resp.status}`);
            return true;
          } catch (e) {
            console.error("Error deleting job:", e);
            return false;
          }
        }

        function matches(job, term, location, type) {
          const title = (job.title || "").toLowerCase();
          const company = (job.company || "").toLowerCase();
          return (term === "" || title.includes(term) || company.includes(term)) &&
            (location === "" || job.location === location) &&
            (type === "" || job.type === type);
        }

        // Lower-cased name first, raw name on ties; same order as listing.sort_jobs.
        function compareCompany(a, b) {
          const rawA = a.company || "";
          const rawB = b.company || "";
          const keyA = rawA.toLowerCase();
          const keyB = rawB.toLowerCase();
          if (keyA !== keyB) return keyA < keyB ? -1 : 1;
          if (rawA !== rawB) return rawA < rawB ? -1 : 1;
          return 0;
        }

        function sortJobs(jobs, criterion) {
          const sorted = [...jobs];
          switch (criterion) {
            case "salary-high":
              sorted.sort((a, b) => (b.salary || 0) - (a.salary || 0));
              break;
            case "salary-low":
              sorted.sort((a, b) => (a.salary || 0) - (b.salary || 0));
              break;
            case "experience-high":
              sorted.sort((a, b) => (b.experience || 0) - (a.experience || 0));
              break;
            case "experience-low":
              sorted.sort((a, b) => (a.experience || 0) - (b.experience || 0));
              break;
            case "company":
              sorted.sort(compareCompany);
              break;
            default:
              break;
          }
          return sorted;
        }

        // Dropdown values come from the jobs on display, not the full list.
        function populateFilter(select, values, allLabel) {
          const current = select.value;
          select.innerHTML = "";
          const all = document.createElement("option");
          all.value = "";
          all.textContent = allLabel;
          select.appendChild(all);
          [...new Set(values.filter(Boolean))].forEach((value) => {
            const option = document.createElement("option");
            option.value = value;
            option.textContent = value;
            select.appendChild(option);
          });
          if (values.includes(current)) select.value = current;
        }

        function line(text) {
          const p = document.createElement("p");
          p.className = "small";
          p.textContent = text;
          return p;
        }

        function renderJobs(jobs, session) {
          jobsContainer.innerHTML = "";
          jobs.forEach((job) => {
            const el = document.createElement("div");
            el.className = "job";
            const title = document.createElement("h3");
            title.textContent = job.title;
            el.appendChild(title);
            el.appendChild(line(`Company: ${job.company}`));
            el.appendChild(line(`Location: ${job.location}`));
            el.appendChild(line(`Job Type: ${job.type || "Not specified"}`));
            el.appendChild(line(`Salary: $${Number(job.salary || 0).toLocaleString()}`));
            el.appendChild(line(`Experience: ${job.experience} years`));

            const apply = document.createElement("button");
            apply.textContent = "Apply Now";
            apply.onclick = () => applyJob(job, session);
            el.appendChild(apply);

            if (session) {
              const del = document.createElement("button");
              del.className = "danger";
              del.textContent = "Delete Job";
              del.onclick = () => deleteJob(job, session);
              el.appendChild(del);
            }
            jobsContainer.appendChild(el);
          });

          populateFilter(locationFilter, jobs.map((j) => j.location), "All Locations");
          populateFilter(jobTypeFilter, jobs.map((j) => j.type), "All Job Types");
        }

        function renderSession(session) {
          userStatus.textContent = session ? `Logged in as ${session.username}` : "Not logged in";
          logoutBtn.classList.toggle("hidden", !session);
          postSection.classList.toggle("hidden", !session);
        }

        // Every change refetches the full list and filters/sorts locally.
        async function refresh() {
          const jobs = await fetchJobs();
          const term = document.getElementById("search").value.toLowerCase();
          const visible = jobs.filter((job) => matches(job, term, locationFilter.value, jobTypeFilter.value));
          renderJobs(sortJobs(visible, sortFilter.value), board.session);
        }

        function applyJob(job, session) {
          if (!session) {
            alert("Please log in to apply for jobs.");
            return;
          }
          alert(`Application submitted for ${job.title}. Best of luck!`);
        }

        async function deleteJob(job, session) {
          if (!session) {
            alert("Please log in to manage job listings.");
            return;
          }
          if (await removeJob(job._id)) {
            alert("Job deleted successfully!");
          } else {
            alert("Could not delete the job.");
          }
          await refresh();
        }

        async function postJob() {
          if (!board.session) {
            alert("Please log in to post jobs.");
            return;
          }
          const value = (id) => document.getElementById(id).value.trim();
          const payload = {
            title: value("new-title"),
            company: value("new-company"),
            location: value("new-location"),
            type: value("new-type"),
            salary: value("new-salary") === "" ? null : Number(value("new-salary")),
            experience: value("new-experience") === "" ? null : Number(value("new-experience")),
          };
          const job = await createJob(payload);
          if (!job) {
            alert("Could not post the job. Please fill in every field.");
            return;
          }
          alert(`Posted ${job.title}.`);
          await refresh();
        }

        function credentials() {
          return {
            username: document.getElementById("username").value,
            password: document.getElementById("password").value,
          };
        }

        async function signup() {
          const creds = credentials();
          if (!creds.username || !creds.password) {
            alert("Please enter a valid username and password.");
            return;
          }
          const resp = await fetch("/auth/signup", {
            method: "POST",
            headers: { "Content-Type": "application/json" },
            body: JSON.stringify(creds),
          }).catch((e) => { console.error(e); return null; });
          alert(resp && resp.ok ? "Signup successful! Please log in." : "Signup failed.");
        }

        async function login() {
          const resp = await fetch("/auth/login", {
            method: "POST",
            headers: { "Content-Type": "application/json" },
            body: JSON.stringify(credentials()),
          }).catch((e) => { console.error(e); return null; });
          if (!resp || !resp.ok) {
            alert("Invalid credentials. Please try again.");
            return;
          }
          board.session = await resp.json();
          renderSession(board.session);
          alert("Login successful!");
          await refresh();
        }

        async function logout() {
          const session = board.session;
          board.session = null;
          if (session) {
            await fetch("/auth/logout", {
              method: "POST",
              headers: { Authorization: `Bearer ${session.token}` },
            }).catch((e) => console.error(e));
          }
          renderSession(null);
          alert("Logged out successfully.");
          await refresh();
        }

        renderSession(board.session);
        refresh();
      </script>
    </body>
    </html>
    """
