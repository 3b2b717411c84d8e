# ui/dashboard.py
import sys, os
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
import streamlit as st
import requests
import pandas as pd
from notifications import Notifier
from parsers.jd_extract import guess_title
from ui.render import format_section, quiz_feedback_rows, report_label, sanitize_html, skills_frame, strip_html
# -------------------- CONFIG --------------------
API_URL = os.getenv("API_URL", "http://localhost:8000")
st.set_page_config(page_title="Resume Quiz Matcher", page_icon="🧠", layout="wide")
st.title("🤖 Resume Job Matcher")

st.markdown(
    "Upload your resume, paste a job description, take a short technical quiz, "
    "and get an AI-generated compatibility report you can save for later."
)

# -------------------- SESSION STATE --------------------
if "api_url" not in st.session_state:
    st.session_state.api_url = API_URL
if "notifier" not in st.session_state:
    st.session_state.notifier = Notifier()
if "resume" not in st.session_state:
    st.session_state.resume = None
# workflow snapshot returned by the API
if "session" not in st.session_state:
    st.session_state.session = None
if "viewing_report" not in st.session_state:
    st.session_state.viewing_report = None
if "confirm_delete" not in st.session_state:
    st.session_state.confirm_delete = None

notifier: Notifier = st.session_state.notifier


def api(method: str, path: str, **kwargs):
    """Call the backend; failures are published and None is returned."""
    try:
        r = requests.request(method, f"{st.session_state.api_url}{path}", timeout=kwargs.pop("timeout", 120), **kwargs)
    except requests.exceptions.RequestException as e:
        notifier.publish(f"Connection error: {e}", "error")
        return None
    if r.status_code >= 400:
        try:
            detail = r.json().get("detail", r.text)
        except ValueError:
            detail = r.text
        severity = "warning" if r.status_code == 400 else "error"
        notifier.publish(str(detail), severity)
        return None
    return r.json() if r.content else {}


def show_notification():
    note = notifier.latest
    if note is None:
        return
    render = {"success": st.success, "info": st.info, "warning": st.warning, "error": st.error}[note.severity]
    render(note.message)


def render_report(quiz_results: dict, analysis: dict):
    st.markdown("### 🧪 Quiz Results")
    st.markdown(f"**Score:** {quiz_results.get('score', 0)} / {quiz_results.get('totalQuestions', 0)}")
    rows = quiz_feedback_rows(quiz_results)
    if rows:
        for row in rows:
            icon = "✅" if row["isCorrect"] else "❌"
            with st.expander(f"{icon} Question {row['number']}: {row['question'][:90]}"):
                st.markdown(f"**Your answer:** {row['selected']}")
                if not row["isCorrect"]:
                    st.markdown(f"**Correct answer:** {row['correct']}")
                st.caption(row["explanation"])

    st.markdown("### 🧩 Skills Match")
    col1, col2 = st.columns(2)
    col1.metric("Match Percentage", f"{analysis.get('skillsMatchPercentage', 0)}%")
    col2.metric("Overall Score", f"{analysis.get('score', 0)}/100")

    df = skills_frame(analysis.get("skillsAnalysis") or [])
    if not df.empty:
        st.bar_chart(df.set_index("skill")[["relevance", "match", "gap"]])
        st.table(df)

    strengths = analysis.get("strengths") or []
    growth = analysis.get("areasForGrowth") or []
    if strengths or growth:
        c1, c2 = st.columns(2)
        with c1:
            st.markdown("#### 💪 Strengths")
            for s in strengths:
                st.markdown(f"- {s}")
        with c2:
            st.markdown("#### 📈 Areas for Growth")
            for g in growth:
                st.markdown(f"- {g}")

    sections = [
        ("Summary", "summary"),
        ("Detailed Analysis", "analysis"),
        ("Recommendations", "recommendations"),
        ("Learning Resources", "learningResources"),
        ("Learning Roadmap", "learningRoadmap"),
    ]
    for heading, key in sections:
        st.markdown(f"### {heading}")
        body = format_section(analysis.get(key, ""))
        st.markdown(sanitize_html(body), unsafe_allow_html=True)


# -------------------- TABS --------------------
with st.sidebar:
    user_id = st.text_input("User ID", value=st.session_state.get("user_id", ""), help="Provided by your sign-in provider")
    st.session_state.user_id = user_id.strip()

show_notification()
tab1, tab2 = st.tabs(["📝 Assessment", "📁 Saved Reports"])

# ==================== TAB 1: Assessment ====================
with tab1:
    session = st.session_state.session

    # ---- step 1: intake ----
    if session is None:
        st.subheader("Upload Resume")
        with st.form("resume_form", clear_on_submit=False):
            resume_file = st.file_uploader("Upload Resume (PDF, DOCX, or TXT)", type=["pdf", "docx", "txt"])
            pasted = st.text_area("...or paste your resume text", height=150)
            submitted = st.form_submit_button("Use This Resume")

        if submitted:
            if resume_file:
                files = {"resume": (resume_file.name, resume_file, resume_file.type)}
                with st.spinner("⏳ Extracting resume text..."):
                    data = api("POST", "/resumes/extract", files=files, timeout=90)
                if data:
                    st.session_state.resume = data
                    notifier.publish("Resume text extracted successfully", "success")
            elif pasted.strip():
                st.session_state.resume = {"text": pasted.strip(), "fileName": "pasted-resume.txt"}
                notifier.publish("Resume text saved", "success")
            else:
                notifier.publish("Please upload a resume or paste its text", "warning")
            st.rerun()

        resume = st.session_state.resume
        if resume:
            with st.expander(f"📄 {resume['fileName']}", expanded=False):
                st.text(resume["text"][:3000])

            st.subheader("Enter Job Description")
            with st.form("job_form"):
                jd_text = st.text_area("Paste the Job Description", height=220)
                start = st.form_submit_button("Start Quiz")
            if start:
                if not jd_text.strip():
                    notifier.publish("Please enter a job description", "error")
                else:
                    created = api("POST", "/sessions", json={"resumeData": resume, "jobDescription": jd_text})
                    if created:
                        with st.spinner("Generating quiz questions..."):
                            questions = api("POST", f"/sessions/{created['id']}/quiz")
                        if questions:
                            st.session_state.session = api("GET", f"/sessions/{created['id']}")
                        else:
                            # the quiz never started; release the server-side session
                            failure = notifier.latest
                            api("DELETE", f"/sessions/{created['id']}")
                            if failure is not None and notifier.latest is not failure:
                                notifier.publish(failure.message, failure.severity)
                st.rerun()

    # ---- step 2: quiz ----
    elif session.get("analysis") is None:
        sid = session["id"]
        q = session.get("currentQuestion")
        total = session.get("totalQuestions", 0)
        st.subheader("Technical Skills Assessment")
        if q is None:
            # scored but the analysis call failed; let the user retry it
            st.warning("Your answers were scored but the analysis is not available yet.")
            if st.button("Retry Analysis"):
                with st.spinner("Analyzing your responses..."):
                    updated = api("POST", f"/sessions/{sid}/submit")
                if updated:
                    st.session_state.session = updated
                st.rerun()
        else:
            idx = q["index"]
            st.markdown(f"**Question {idx + 1} of {total}** · {session.get('answered', 0)} of {total} answered")
            st.markdown(q["question"])
            current = session.get("answers", {}).get(str(idx))
            choice = st.radio(
                "Choose one", options=list(range(len(q["options"]))),
                format_func=lambda i: q["options"][i],
                index=current if current is not None else None,
                key=f"q_{sid}_{idx}",
            )
            if choice is not None and choice != current:
                updated = api("PUT", f"/sessions/{sid}/answers/{idx}", json={"choice": choice})
                if updated:
                    st.session_state.session = updated
                    st.rerun()

            left, right = st.columns(2)
            if left.button("Previous", disabled=idx == 0):
                st.session_state.session = api("POST", f"/sessions/{sid}/previous") or session
                st.rerun()
            last = idx == total - 1
            if right.button("Submit" if last else "Next", disabled=current is None):
                path = "submit" if last else "next"
                with st.spinner("Analyzing your responses..." if last else "Saving answer..."):
                    updated = api("POST", f"/sessions/{sid}/{path}")
                st.session_state.session = updated or api("GET", f"/sessions/{sid}") or session
                st.rerun()

    # ---- step 3: results ----
    else:
        st.subheader("Analysis Results")
        left, right = st.columns(2)
        if left.button("Start Over"):
            api("DELETE", f"/sessions/{session['id']}")
            st.session_state.session = None
            st.session_state.resume = None
            notifier.clear()
            st.rerun()
        if right.button("Save Report"):
            if not st.session_state.user_id:
                notifier.publish("You must be logged in to save reports", "error")
            else:
                payload = {
                    "resumeData": session["resumeData"],
                    "jobDescription": session["jobDescription"],
                    "quizResults": session["quizResults"],
                    "analysis": session["analysis"],
                }
                saved = api("POST", f"/users/{st.session_state.user_id}/reports", json=payload)
                if saved:
                    notifier.publish("Report saved successfully", "success")
            st.rerun()
        render_report(session["quizResults"], session["analysis"])

# ==================== TAB 2: Saved Reports ====================
with tab2:
    uid = st.session_state.user_id
    if not uid:
        st.warning("⚠️ You must be logged in to view saved reports.")
    elif st.session_state.viewing_report:
        report = api("GET", f"/users/{uid}/reports/{st.session_state.viewing_report}")
        if st.button("⬅️ Back to Reports"):
            st.session_state.viewing_report = None
            st.rerun()
        if report:
            st.markdown(f"**Resume:** {report['resumeData']['fileName']}")
            with st.expander("📜 Job Description"):
                st.write(report["jobDescription"])
            render_report(report["quizResults"], report["analysis"])
    else:
        reports = api("GET", f"/users/{uid}/reports") or []
        if not reports:
            st.info("No saved reports yet.")
        for rep in reports:
            title = guess_title(rep.get("jobDescription", ""))
            with st.container(border=True):
                st.markdown(f"**{report_label(rep, title)}**")
                st.caption(strip_html(rep.get("analysis", {}).get("summary", ""))[:240])
                rid = rep.get("id")
                if not rid:
                    continue
                c1, c2 = st.columns(2)
                if c1.button("View", key=f"view_{rid}"):
                    st.session_state.viewing_report = rid
                    st.rerun()
                if st.session_state.confirm_delete == rid:
                    c2.warning("Delete this report? This cannot be undone.")
                    yes, no = c2.columns(2)
                    if yes.button("Confirm", key=f"confirm_{rid}", type="primary"):
                        st.session_state.confirm_delete = None
                        if api("DELETE", f"/users/{uid}/reports/{rid}") is not None:
                            notifier.publish("Report deleted successfully", "success")
                        st.rerun()
                    if no.button("Cancel", key=f"cancel_{rid}"):
                        st.session_state.confirm_delete = None
                        st.rerun()
                elif c2.button("Delete", key=f"delete_{rid}"):
                    st.session_state.confirm_delete = rid
                    st.rerun()

        if reports:
            overview = pd.DataFrame([
                {"Role": guess_title(r.get("jobDescription", "")),
                 "Quiz": f"{r['quizResults']['score']}/{r['quizResults']['totalQuestions']}",
                 "Skills Match (%)": r["analysis"].get("skillsMatchPercentage", 0),
                 "Overall (/100)": r["analysis"].get("score", 0)}
                for r in reports
            ])
            st.markdown("### 📊 Overview")
            st.table(overview)
