import json
import unittest

from services.errors import CompletionParseError, CompletionServiceError
from services.link_store import LinkStore
from services.suggestion_resolver import (
    build_suggestion_prompt,
    fallback_links,
    parse_ai_links,
    resolve_suggestions,
    strip_code_fences,
)


class _FakeCompletion:
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


AI_REPLY = json.dumps([
    {"url": "https://www.zara.com", "description": "Zara: Shop online"},
    {"url": "https://www.hm.com", "description": "H&M: Browse jackets"},
])


class SavedLinkTests(unittest.IsolatedAsyncioTestCase):
    async def test_saved_match_skips_completion_service(self):
        store = LinkStore()
        store.add("milk,grocery", "https://shop.example", "Shop: Buy milk")
        completion = _FakeCompletion(reply=AI_REPLY)

        links = await resolve_suggestions("buy milk", store, completion)

        self.assertEqual(len(links), 1)
        self.assertEqual(links[0].url, "https://shop.example")
        self.assertEqual(links[0].description, "Shop: Buy milk")
        self.assertEqual(links[0].source, "saved")
        self.assertEqual(completion.prompts, [])

    async def test_saved_matches_truncated_to_three_in_store_order(self):
        store = LinkStore()
        for i in range(5):
            store.add("milk", f"https://shop{i}.example", f"Shop {i}")

        links = await resolve_suggestions("milk", store, _FakeCompletion())

        self.assertEqual([link.url for link in links], [f"https://shop{i}.example" for i in range(3)])


class AiSuggestionTests(unittest.IsolatedAsyncioTestCase):
    async def test_ai_reply_tagged_as_ai(self):
        completion = _FakeCompletion(reply=AI_REPLY)

        links = await resolve_suggestions("buy a winter jacket", LinkStore(), completion)

        self.assertEqual([link.source for link in links], ["ai", "ai"])
        self.assertEqual(links[0].description, "Zara: Shop online")
        self.assertEqual(len(completion.prompts), 1)

    async def test_code_fenced_reply_is_accepted(self):
        completion = _FakeCompletion(reply=f"```json\n{AI_REPLY}\n```")

        links = await resolve_suggestions("buy a winter jacket", LinkStore(), completion)

        self.assertEqual(len(links), 2)

    async def test_prompt_uses_default_location(self):
        completion = _FakeCompletion(reply=AI_REPLY)

        await resolve_suggestions("renew passport", LinkStore(), completion)

        self.assertIn("User location: Israel", completion.prompts[0])
        self.assertIn('"renew passport"', completion.prompts[0])

    async def test_prompt_uses_given_location(self):
        completion = _FakeCompletion(reply=AI_REPLY)

        await resolve_suggestions("renew passport", LinkStore(), completion, user_location="Berlin")

        self.assertIn("User location: Berlin", completion.prompts[0])


class FallbackTests(unittest.IsolatedAsyncioTestCase):
    async def test_service_failure_returns_search_link(self):
        completion = _FakeCompletion(error=CompletionServiceError("boom"))

        links = await resolve_suggestions("fix bike & chain", LinkStore(), completion)

        self.assertEqual(len(links), 1)
        self.assertEqual(links[0].source, "fallback")
        self.assertEqual(links[0].description, "Search on Google")
        self.assertEqual(links[0].url, "https://www.google.com/search?q=fix%20bike%20%26%20chain")

    async def test_malformed_reply_returns_search_link(self):
        completion = _FakeCompletion(reply="Here are some links: zara.com")

        links = await resolve_suggestions("buy jacket", LinkStore(), completion)

        self.assertEqual([link.source for link in links], ["fallback"])

    async def test_unexpected_error_returns_search_link(self):
        completion = _FakeCompletion(error=RuntimeError("unexpected"))

        links = await resolve_suggestions("buy jacket", LinkStore(), completion)

        self.assertEqual([link.source for link in links], ["fallback"])

    async def test_missing_title_returns_search_link_without_calling_service(self):
        completion = _FakeCompletion(reply=AI_REPLY)

        links = await resolve_suggestions(None, LinkStore(), completion)

        self.assertEqual(links[0].source, "fallback")
        self.assertEqual(completion.prompts, [])


class ParsingTests(unittest.TestCase):
    def test_strip_code_fences(self):
        self.assertEqual(strip_code_fences('```json\n[1]\n```'), "[1]")
        self.assertEqual(strip_code_fences('```\n[1]```'), "[1]")

    def test_non_array_rejected(self):
        with self.assertRaises(CompletionParseError):
            parse_ai_links('{"url": "https://a.example"}', 3)

    def test_entries_without_url_dropped(self):
        links = parse_ai_links('[{"description": "x"}, {"url": "https://a.example"}, "junk"]', 3)
        self.assertEqual([link.url for link in links], ["https://a.example"])
        self.assertEqual(links[0].description, "")

    def test_empty_array_rejected(self):
        with self.assertRaises(CompletionParseError):
            parse_ai_links("[]", 3)

    def test_truncated_to_limit(self):
        reply = json.dumps([{"url": f"https://{i}.example", "description": str(i)} for i in range(5)])
        self.assertEqual(len(parse_ai_links(reply, 3)), 3)

    def test_fallback_keeps_unreserved_characters(self):
        self.assertEqual(fallback_links("it's (done)!")[0].url, "https://www.google.com/search?q=it's%20(done)!")

    def test_prompt_includes_due_date_and_priority_when_given(self):
        prompt = build_suggestion_prompt("pay bill", due_date="2026-11-01", priority="high")
        self.assertIn("Due date: 2026-11-01", prompt)
        self.assertIn("Priority: high", prompt)
        self.assertNotIn("Due date", build_suggestion_prompt("pay bill"))
