"""
Constantes Globais do Sistema.
Fonte Única da Verdade (Single Source of Truth) para os dados fixos da escola.
"""

# Coleções no Firestore (todas sob artifacts/<app_id>/public/data/)
COLLECTION_EVENTS = 'events'
COLLECTION_NOTICES = 'notices'
COLLECTION_SCORES = 'scores'

STORE_NAMESPACE = 'artifacts'
STORE_SCOPE = 'public'

EVENT_CATEGORIES = ['Sports', 'Academic', 'Club', 'Art', 'Culture', 'Other']

# Eventos de base, exibidos antes do primeiro snapshot.
# Um evento vivo com o mesmo título substitui o seu equivalente aqui.
SEED_EVENTS = [
    {
        'id': '1',
        'title': 'Sports Day',
        'date': '2025-10-15',
        'description': 'Annual sports meet with various competitions like relay, sprints, and long jump.',
        'category': 'Sports',
    },
    {
        'id': '2',
        'title': 'Essay Writing Competition',
        'date': '2025-11-05',
        'description': 'A creative writing competition for all grades. Topic: The Future of AI.',
        'category': 'Academic',
    },
    {
        'id': '3',
        'title': 'Model United Nations (MUN)',
        'date': '2025-11-20',
        'description': 'Simulating UN procedures, focused on debate and diplomacy.',
        'category': 'Club',
    },
    {
        'id': '4',
        'title': 'Photography Contest',
        'date': '2025-12-01',
        'description': 'Capture moments around the campus. Theme: Everyday Heroes.',
        'category': 'Art',
    },
    {
        'id': '5',
        'title': 'Talent Hunt',
        'date': '2025-12-15',
        'description': 'Showcase your skills in singing, dancing, or stand-up comedy.',
        'category': 'Culture',
    },
]

# Contas ilustrativas, uma por papel. Não é uma barreira de segurança.
MOCK_CREDENTIALS = {
    'Teacher': {'username': 'teacher', 'password': 'pass'},
    'Student': {'username': 'student', 'password': 'pass'},
}

# Turma fixa usada na planilha de notas (ainda não existe coleção de alunos)
MOCK_STUDENTS = [
    {'id': 'student-A', 'name': 'Alfie B.'},
    {'id': 'student-B', 'name': 'Betty C.'},
    {'id': 'student-C', 'name': 'Charlie D.'},
    {'id': 'student-D', 'name': 'Dana E.'},
]

MOCK_STUDENT_PROFILE = {
    'name': 'Jane Doe (Mock Student)',
    'class': 'XI',
    'section': 'A',
    'address': '123 School Road, City, Zip',
    'phone': '9876543210',
}

# Mensagens exibidas ao usuário
MESSAGES = {
    'fill_all_fields': 'Please fill in all fields.',
    'event_added': 'Event successfully added!',
    'event_failed': 'Failed to add event. Please try again.',
    'notice_empty': 'Notice cannot be empty.',
    'notice_sent': 'Notice sent successfully!',
    'notice_failed': 'Failed to send notice. Please try again.',
    'choose_event': 'Please choose an event.',
    'scores_published': 'Scores successfully published/updated!',
    'scores_failed': 'Failed to publish scores. Please try again.',
    'invalid_credentials': 'Invalid credentials. Please try again.',
    'init_failed': 'Failed to initialize Firebase services.',
    'sign_in_failed': 'Failed to sign in to Firebase services.',
    'choose_role_first': 'Choose a role before logging in.',
    'no_events': 'No events currently scheduled.',
    'no_notices': 'No notices yet.',
    'no_scores': 'No results have been published yet.',
}
