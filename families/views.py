import logging

from django.contrib import messages
from django.http import Http404, HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django_htmx.http import HttpResponseClientRedirect

from . import editor
from .directory import DirectoryBrowser, describe_family, load_directory
from .export import XLSX_CONTENT_TYPE, build_workbook, export_filename, flatten_directory
from .forms import DirectorySearchForm, build_forms
from .store import RecordNotFound, RecordStore, StoreError

logger = logging.getLogger(__name__)

SUBMIT_SUCCESS_MESSAGE = 'Family details submitted successfully!'
SUBMIT_FAILED_MESSAGE  = 'An error occurred while submitting family details.'
EXPORT_FAILED_MESSAGE  = 'An error occurred while exporting data.'
LOAD_FAILED_MESSAGE    = 'Family details could not be loaded. Please try again.'


def get_store():
    return RecordStore()


def _back_to_directory(request):
    if request.htmx:
        return HttpResponseClientRedirect(reverse('families:directory'))
    return redirect('families:directory')


def _load_failed(request, family_id):
    logger.exception(f"Could not load family {family_id}")
    messages.error(request, LOAD_FAILED_MESSAGE)
    return _back_to_directory(request)


# ════════════════════════════════════════════════════════════
# DIRECTORY (HTMX live search)
# ════════════════════════════════════════════════════════════
def directory(request):
    """
    Family directory with live search.

    HTMX search requests only get the table partial back.
    """
    form = DirectorySearchForm(request.GET)
    query = form.cleaned_data.get('q', '') if form.is_valid() else ''

    try:
        browser = DirectoryBrowser.load(get_store())
    except StoreError:
        logger.exception("Could not load the family directory")
        return render(request, 'families/family_list.html', {
            'form': form,
            'is_loading': True,
        })

    browser.search(query)

    context = {
        'form': form,
        'rows': browser.rows,
        'query': browser.query,
        'total_count': len(browser.all_families),
        'is_loading': False,
    }

    if request.htmx:
        return render(request, 'families/partials/family_table.html', context)

    return render(request, 'families/family_list.html', context)


# ════════════════════════════════════════════════════════════
# FAMILY DETAIL (HTMX Modal)
# ════════════════════════════════════════════════════════════
def family_detail(request, pk):
    """Full record of one family, shown as a popup."""
    store = get_store()
    try:
        family = store.get_family(pk)
        family['members'] = store.get_members(pk)
    except RecordNotFound:
        raise Http404("Family not found")
    except StoreError:
        return _load_failed(request, pk)

    context = describe_family(family)

    if request.htmx:
        return render(request, 'families/partials/family_detail_modal.html', context)

    return render(request, 'families/family_detail.html', context)


# ════════════════════════════════════════════════════════════
# FAMILY EDITOR (create + update)
# ════════════════════════════════════════════════════════════
def family_create(request):
    """New family with its first (Self) member."""
    if request.method == 'POST':
        draft = editor.draft_from_form_data(request.POST)
        state = editor.EditorState(draft=draft, status=editor.EditorStatus.EDITING)
        return _handle_editor_post(request, state)

    return _render_editor(request, editor.new_family())


def family_update(request, pk):
    """Edit one family and its members."""
    if request.method == 'POST':
        draft = editor.draft_from_form_data(request.POST, family_id=pk)
        state = editor.EditorState(draft=draft, status=editor.EditorStatus.EDITING)
        return _handle_editor_post(request, state)

    try:
        state = editor.load_family(get_store(), pk)
    except RecordNotFound:
        raise Http404("Family not found")
    except StoreError:
        return _load_failed(request, pk)

    return _render_editor(request, state)


def _parse_action(raw):
    name, _, index = (raw or 'submit').partition(':')
    try:
        return name, int(index) if index else None
    except ValueError:
        return name, None


def _handle_editor_post(request, state):
    action, index = _parse_action(request.POST.get('action'))

    if action == 'submit':
        return _submit(request, state)

    try:
        if action == 'add_member':
            state = editor.add_member(state)
        elif action == 'remove_member':
            state = editor.remove_member(state, index if index is not None else -1)
        elif action == 'set_relation':
            position = index if index is not None else -1
            relation = request.POST.get(f'members-{position}-relation', '')
            state = editor.update_member(state, position, relation=relation)
        elif action == 'generate_code':
            state = editor.generate_family_code(state)
        else:
            messages.warning(request, f'Unknown action: {action}')
    except editor.EditorError as exc:
        messages.warning(request, str(exc))

    return _render_editor(request, state)


def _submit(request, state):
    def on_done(done_state):
        messages.success(request, SUBMIT_SUCCESS_MESSAGE)

    state = editor.submit(state, get_store(), on_done=on_done)

    if state.status == editor.EditorStatus.DONE:
        return _back_to_directory(request)

    if state.status == editor.EditorStatus.FAILED:
        if state.failure == editor.FailureKind.DUPLICATE_CODE:
            messages.error(
                request,
                f'Family code {state.draft.family_code} is already in use. '
                'Choose another code or generate a new one.'
            )
        else:
            messages.error(request, SUBMIT_FAILED_MESSAGE)

    # Back to an editable form; writes that already went through stay
    return _render_editor(request, state)


def _render_editor(request, state):
    draft = state.draft
    family_form, member_formset = build_forms(draft.as_dict(), bound=bool(state.errors))

    context = {
        'state': state,
        'family_form': family_form,
        'member_formset': member_formset,
        'removed_member_ids': ','.join(str(i) for i in draft.removed_member_ids),
        'is_new': draft.is_new,
        'title': 'Family Directory - Admin Panel' if draft.is_new else 'Edit Family Details',
        'submit_text': 'Submit Family Details',
        'form_action': (
            reverse('families:create') if draft.is_new
            else reverse('families:update', args=[draft.id])
        ),
    }

    # HTMX: Return the editor body only
    if request.htmx:
        return render(request, 'families/partials/family_editor.html', context)

    return render(request, 'families/family_form.html', context)


# ════════════════════════════════════════════════════════════
# FAMILY DELETE
# ════════════════════════════════════════════════════════════
def family_delete(request, pk):
    """Remove a family together with all of its members."""
    store = get_store()
    try:
        family = store.get_family(pk)
    except RecordNotFound:
        raise Http404("Family not found")
    except StoreError:
        return _load_failed(request, pk)

    if request.method == 'POST':
        try:
            store.delete_family(pk)
        except StoreError:
            logger.exception(f"Could not delete family {family['family_code']}")
            messages.error(request, f'Family {family["family_code"]} could not be deleted.')
            return _back_to_directory(request)

        messages.warning(request, f'Family {family["family_code"]} has been deleted.')
        return _back_to_directory(request)

    return render(request, 'families/family_confirm_delete.html', {'family': family})


# ════════════════════════════════════════════════════════════
# EXPORT
# ════════════════════════════════════════════════════════════
def export_directory(request):
    """
    Download every member of every family as an .xlsx file.

    Always the full directory, whatever the current search shows.
    """
    try:
        families = load_directory(get_store())
    except StoreError:
        logger.exception("Could not load the directory for export")
        messages.error(request, EXPORT_FAILED_MESSAGE)
        return redirect('families:directory')

    wb = build_workbook(flatten_directory(families))

    response = HttpResponse(content_type=XLSX_CONTENT_TYPE)
    response['Content-Disposition'] = f'attachment; filename={export_filename()}'

    wb.save(response)
    return response
