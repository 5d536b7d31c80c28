# Property Configuration for the Notion book database
# Each logical book field is matched against these property names in order;
# the first name present in the database schema receives the value.
# Add your own property names to the front of a list to take priority.
# Run `python main.py schema` to list the properties of your database.

# The title is always written to whichever property has type "title".
TITLE_FIELD = "title"

FIELD_CANDIDATES = {
    "author": ["Author", "Authors", "저자", "작가", "author"],
    "link": ["Link", "URL", "Info", "링크"],
    "cover": ["Cover", "Cover Image", "표지"],
    "publisher": ["Publisher", "출판사"],
    "isbn13": ["ISBN", "ISBN13", "isbn13"],
    "published": ["Published", "Publication Date", "Publish Start", "출간일", "출판일"],
    "description": ["Description", "Summary", "책 소개", "소개"],
    "genres": ["Genres", "Genre", "Categories", "장르", "분류"],
    "status": ["Status", "상태", "읽기 상태"],
    "rating": ["Rating", "평점", "별점"],
    "owned": ["Owned", "소장"],  # checkbox
}

# Injected for the status field when the caller does not send one.
# Status-typed properties fall back to their first option if this name is unknown.
DEFAULT_STATUS = "읽고 싶은 책"

# Page decoration used on every created page
PAGE_ICON = "📚"
