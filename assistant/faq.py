"""
FAQ Rules - Built-in rule table for the student job board
=========================================================

The default rules answer common questions about the job board:
searching, applying, profiles, saved jobs, interviews and so on.
Order is evaluation order and several trigger sets overlap ("help"
is a greeting trigger and also part of "help me"), so earlier rules
shadow later ones.

Custom tables can be loaded from YAML:

    rules:
      - name: greeting
        triggers: ["hello", "hi"]
        response: "Hi there!"
    fallbacks:
      - "Could you rephrase that?"
"""

from pathlib import Path
from typing import Union

import yaml

from core.exceptions import RuleError
from core.logging import get_logger
from .engine import Rule, RuleTable

logger = get_logger("assistant.faq")

GREETING = (
    "Hi there! 👋 I'm here to help you with your job search. You can ask me about "
    "finding jobs, creating your profile, applying for positions, or navigating the "
    "website. How can I assist you today?"
)

# "apply for this job" contains "hi", so the application rule is checked
# before the greeting rule. Salary comes before internships because
# "intern" is part of many salary questions.
DEFAULT_RULES = (
    Rule(
        name="application_process",
        triggers=(
            "how to apply", "how do i apply", "apply for job", "apply for this job",
            "application process", "applying",
        ),
        response=(
            "Applying is easy! 📝 Click on any job posting that interests you 👀 Review "
            "the job description and requirements 🚀 Click the 'Apply Now' button 📄 "
            "Upload your resume and fill out the application form. Make sure your "
            "profile is complete for better chances!"
        ),
    ),
    Rule(
        name="greeting",
        triggers=(
            "hi", "hello", "hey", "good morning", "good afternoon", "good evening", "help",
        ),
        response=GREETING,
    ),
    Rule(
        name="job_search",
        triggers=(
            "find jobs", "search jobs", "job search", "looking for work",
            "how to find", "where to find",
        ),
        response=(
            "To find jobs on our platform: 📍 Use the search bar at the top to enter job "
            "titles or keywords 🌍 Add your location to filter nearby opportunities 🔍 "
            "Browse through the results and click on jobs that interest you. Need help "
            "with something specific?"
        ),
    ),
    Rule(
        name="profile",
        triggers=("profile", "create profile", "update profile", "my profile"),
        response=(
            "Your profile is your digital resume! ✨ Go to your profile section 📝 Fill "
            "in your education, skills, and experience 📄 Upload your resume 🎯 Add a "
            "professional photo. A complete profile gets 3x more employer views!"
        ),
    ),
    Rule(
        name="resume",
        triggers=("resume", "cv"),
        response=(
            "Here are some key tips for your resume:\n\n"
            "• Keep it concise (1-2 pages max)\n"
            "• Use action verbs and quantify achievements\n"
            "• Tailor it to each job application\n"
            "• Include relevant keywords from job descriptions\n"
            "• Proofread carefully for errors\n"
            "• Use a clean, professional format\n\n"
            "Would you like specific advice for any section of your resume?"
        ),
    ),
    Rule(
        name="saved_jobs",
        triggers=("save job", "bookmark", "save for later", "favorite", "heart icon"),
        response=(
            "You can save jobs to apply later! 💾 Click the heart/bookmark icon on any "
            "job posting 📋 Find your saved jobs in the 'Saved Jobs' section 🔔 You'll "
            "get notifications if saved jobs have updates or deadlines approaching."
        ),
    ),
    Rule(
        name="salary",
        triggers=("salary", "pay", "wage", "how much", "money", "stipend"),
        response=(
            "Salary varies by role and location! 💰 Check individual job postings for "
            "salary ranges 📊 Entry-level positions typically range $30k-50k 🌟 "
            "Internships may be $15-25/hour 📈 Your skills and education affect offers. "
            "Negotiate respectfully!"
        ),
    ),
    Rule(
        name="internships",
        triggers=("internship", "intern", "summer job", "part-time", "part time"),
        response=(
            "Looking for internships? Great choice! 🎓 Use the job type filter to select "
            "'Internships' 📅 Many companies post summer internships in spring 💼 "
            "Consider both paid and unpaid opportunities for experience. Check our "
            "internship section for the latest opportunities!"
        ),
    ),
    Rule(
        name="interviews",
        triggers=("interview",),
        response=(
            "Great question about interviews! For comprehensive interview preparation, "
            "try our AI Interview Prep. It offers:\n\n"
            "• Role-specific question generation\n"
            "• Feedback and scoring on your answers\n"
            "• Company-specific insights\n"
            "• Body language and presentation tips\n\n"
            "Would you like me to help you with any specific interview topic?"
        ),
    ),
    Rule(
        name="remote_work",
        triggers=("remote", "work from home", "virtual", "online", "wfh", "hybrid"),
        response=(
            "Remote work is popular! 🏠 Use location filter and select 'Remote' 💻 Many "
            "companies offer hybrid options 🌍 Remote jobs often have more competition "
            "⚡ Make sure you have good internet and workspace. Filter by 'Remote' to "
            "see all virtual opportunities!"
        ),
    ),
    Rule(
        name="technical_issues",
        triggers=(
            "not working", "error", "problem", "bug", "broken", "issue",
            "cant access", "can't access",
        ),
        response=(
            "Sorry you're having trouble! 🔧 Try refreshing the page or clearing your "
            "browser cache 📱 Make sure you're using a supported browser 💬 Contact our "
            "support team at support@studentjobs.com for technical issues. I'm here for "
            "general questions!"
        ),
    ),
    Rule(
        name="companies",
        triggers=(
            "companies", "employers", "which companies", "company list",
            "who hires", "top companies",
        ),
        response=(
            "We partner with amazing companies! 🏢 Browse job postings to see all "
            "employers 🌟 We have startups, Fortune 500s, and everything in between 🎯 "
            "Use company size filters to find your preferred work environment. Check "
            "individual company profiles for more details!"
        ),
    ),
    Rule(
        name="dashboard",
        triggers=("dashboard",),
        response=(
            "Your Dashboard is your personal job search hub! Here you can:\n\n"
            "• View all your saved/favorite jobs\n"
            "• Track your application history\n"
            "• See application status updates\n"
            "• Access interview preparation tools\n\n"
            "Make sure you're signed in to access all dashboard features!"
        ),
    ),
    Rule(
        name="tips",
        triggers=("tips", "advice", "suggestions", "help me", "what should i do"),
        response=(
            "Here are some great job search tips! 🌟 Keep your profile updated 📝 Apply "
            "within 48 hours of job posting 🎯 Customize your applications for each role "
            "⭐ Follow up professionally 📊 Track your applications. What specific area "
            "would you like tips on?"
        ),
    ),
    Rule(
        name="account",
        triggers=("login", "sign in", "password", "account", "register", "sign up"),
        response=(
            "Having account issues? 🔐 Use the 'Sign In' button at the top right 📧 "
            "Check your email for verification links 🔄 Use 'Forgot Password' if needed "
            "📞 Contact support if you're still having trouble. Need help with anything "
            "else?"
        ),
    ),
    Rule(
        name="job_categories",
        triggers=(
            "job types", "categories", "what jobs", "available jobs", "fields", "industries",
        ),
        response=(
            "We have opportunities in many fields! 💻 Technology & IT 📈 Marketing & "
            "Sales 🏥 Healthcare 📚 Education 🎨 Creative & Design 🔬 Research 🏭 "
            "Manufacturing and more! Use our category filters to explore specific "
            "industries."
        ),
    ),
    Rule(
        name="success_stories",
        triggers=("success", "testimonials", "reviews", "stories", "does this work"),
        response=(
            "Yes, we help students find great opportunities! 🎉 Over 10,000 students "
            "have found jobs through our platform ⭐ 4.8/5 average rating from users 💼 "
            "85% of users find jobs within 3 months 📈 Many go on to full-time roles. "
            "You're in good hands!"
        ),
    ),
)

DEFAULT_FALLBACKS = (
    "I'm still learning! 🤖 Could you rephrase that? I can help with job searching, "
    "applications, profiles, interviews, and general website questions.",
    "That's a great question! For detailed help, try browsing our FAQ section or "
    "contact our support team. I'm best at helping with job search basics!",
    "I'd love to help! Try asking about finding jobs, creating your profile, or how "
    "to apply for positions. What would you like to know?",
)


def default_rule_table() -> RuleTable:
    """Get the built-in FAQ rule table."""
    return RuleTable(rules=DEFAULT_RULES, fallbacks=DEFAULT_FALLBACKS)


def load_rule_table(path: Union[str, Path]) -> RuleTable:
    """
    Load a rule table from a YAML file.

    Args:
        path: Path to the rules file

    Returns:
        Validated RuleTable

    Raises:
        RuleError: If the file cannot be read or is not a valid table
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise RuleError(f"Failed to parse rules file: {e}", {"path": str(path)})
    except OSError as e:
        raise RuleError(f"Failed to read rules file: {e}", {"path": str(path)})

    table = RuleTable.from_dict(data)
    logger.info(f"Loaded {len(table.rules)} rules from {path}")
    return table


def save_rule_table(table: RuleTable, path: Union[str, Path]) -> None:
    """
    Write a rule table to a YAML file, keeping rule order.

    Raises:
        RuleError: If the file cannot be written
    """
    path = Path(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(
                table.to_dict(), f,
                default_flow_style=False, sort_keys=False, allow_unicode=True
            )
    except OSError as e:
        raise RuleError(f"Failed to write rules file: {e}", {"path": str(path)})


def rule_table_from_config(config) -> RuleTable:
    """
    Get the rule table selected by the application config.

    A broken custom rules file raises RuleError instead of silently
    falling back to the built-in table.
    """
    if config.assistant.rules_file:
        return load_rule_table(config.assistant.rules_file)
    return default_rule_table()
