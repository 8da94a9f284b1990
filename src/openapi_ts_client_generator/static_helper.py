"""Fixed fetch wrapper emitted next to the generated client."""

from __future__ import annotations

HELPER_DOCUMENT = """// Generated utility composable for API requests

import { $fetch } from 'ofetch'

type Methods =
  | "GET"
  | "HEAD"
  | "PATCH"
  | "POST"
  | "PUT"
  | "DELETE"
  | "CONNECT"
  | "OPTIONS"
  | "TRACE"
  | "get"
  | "head"
  | "patch"
  | "post"
  | "put"
  | "delete"
  | "connect"
  | "options"
  | "trace";

export async function useApiService<T>(
  url: string,
  options: {
    method?: Methods;
    query?: Record<string, any>;
    body?: any;
    headers?: HeadersInit;
    baseURL?: string;
    parseResponse?: boolean;
  } = {}
): Promise<T> {
  const {
    method = "GET",
    query,
    body,
    headers = {},
    baseURL,
    parseResponse = true
  } = options;

  try {
    const result = await $fetch<T>(url, {
      baseURL,
      method,
      query,
      body,
      headers
    });

    return parseResponse ? result : (result as unknown as T);
  } catch (err: any) {
    console.error(`[useApiService] ${method} ${url}`, err);
    throw err;
  }
}
"""


def render_helper_document() -> str:
    """Return the fetch wrapper source; it does not depend on the input document."""
    return HELPER_DOCUMENT
